"""Starter FAQ entries loaded by ``manage.py seed_faqs``."""

DEFAULT_FAQS = [
    {
        "category": "Allgemein",
        "question": "Was ist housnkuh und wie funktioniert die Plattform?",
        "answer": (
            "housnkuh verbindet regionale Direktvermarkter mit Endkunden. Direktvermarkter registrieren "
            "sich, erstellen ihr Profil und mieten Verkaufsflächen im Laden."
        ),
        "keywords": ["plattform", "funktionsweise", "direktvermarkter", "kunden"],
        "order": 1,
    },
    {
        "category": "Registrierung",
        "question": "Wie kann ich mich als Direktvermarkter registrieren?",
        "answer": (
            "Wählen Sie auf der Preise-Seite Ihre Pakete und füllen Sie das Formular mit Ihren "
            "Betriebsdaten aus. Nach der E-Mail-Bestätigung weisen wir Ihnen passende Mietfächer zu."
        ),
        "keywords": ["registrierung", "anmeldung", "direktvermarkter", "probemonat"],
        "order": 1,
    },
    {
        "category": "Registrierung",
        "question": "Kann ich den Probemonat jederzeit kündigen?",
        "answer": (
            "Ja, während des kostenlosen Probemonats können Sie Ihre Buchung im Dashboard jederzeit "
            "ohne Angabe von Gründen kündigen."
        ),
        "keywords": ["kündigung", "probemonat", "kostenlos", "dashboard"],
        "order": 2,
    },
    {
        "category": "Buchungen",
        "question": "Welche Verkaufsflächen stehen zur Verfügung?",
        "answer": (
            "Regalblöcke in Lage A und B, gekühlte und gefrorene Bereiche, Verkaufstische und "
            "Schaufenster. Längere Mietdauern werden mit Rabatt belohnt."
        ),
        "keywords": ["flächen", "regal", "kühlung", "tisch", "schaufenster"],
        "order": 1,
    },
    {
        "category": "Zahlungen",
        "question": "Wie wird abgerechnet und wann muss ich bezahlen?",
        "answer": (
            "Die Abrechnung erfolgt monatlich im Voraus. Der Probemonat ist kostenfrei, "
            "zahlungspflichtig wird die Buchung erst danach."
        ),
        "keywords": ["abrechnung", "zahlung", "monatlich", "rechnung"],
        "order": 1,
    },
    {
        "category": "Support",
        "question": "Wie erreiche ich den housnkuh-Support?",
        "answer": "Per E-Mail unter info@housnkuh.de. Wir antworten in der Regel innerhalb von 24 Stunden.",
        "keywords": ["support", "hilfe", "kontakt", "email"],
        "order": 1,
    },
]
