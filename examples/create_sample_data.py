"""Crée un jeu de démonstration pour CertiMatch (tableur, PDF factices, config)."""

import json
from pathlib import Path

import pandas as pd

DATA_DIR = Path(__file__).parent / "data"
DOCS_DIR = DATA_DIR / "certificats"
DOCS_DIR.mkdir(parents=True, exist_ok=True)

recipients = pd.DataFrame({
    "Nom": ["Hélène Dupont", "Martin Leroy", "Jon Bernard", "Alice", "Chloé Durand", ""],
    "Email": ["h.dupont@ex.org", "m.leroy@ex.org", "j.bernard@ex.org", "alice@ex.org", "c.durand@ex.org", "x@ex.org"],
    "Exclure": ["", "", "", "", "oui", ""],
})

documents = [
    "Certificate_Helene_Dupont.pdf",
    "martin-leroy.pdf",
    "John_Bernard.pdf",
    "Alice_Certificate_2024.pdf",
    "Chloe_Durand.pdf",
]

recipients.to_excel(DATA_DIR / "recipients.xlsx", index=False, engine="openpyxl")
for name in documents:
    (DOCS_DIR / name).write_bytes(b"%PDF-1.4\n%%EOF\n")

config = {
    "recipients_file": "recipients.xlsx",
    "documents_dir": "certificats",
    "name_field": "Nom",
    "skip_column": "Exclure",
}
(DATA_DIR / "config.json").write_text(json.dumps(config, indent=2, ensure_ascii=False), encoding="utf-8")
print(f"Fichiers créés dans {DATA_DIR}")
