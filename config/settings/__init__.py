"""Settings package for the housnkuh backend.

`base.py` holds the configuration shared across environments; `dev.py`,
`test.py` and `prod.py` extend it with environment specific overrides.
"""
