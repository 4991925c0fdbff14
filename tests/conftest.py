"""Shared test fixtures for the receipt text parser test suite."""

from pathlib import Path

import pytest

from receipt_text.extraction.parser import ReceiptTextParser

FRENCH_RECEIPT = """Epicerie Atlas
12 Rue Ibn Batouta, Casablanca
Tel: 0522 45 67 89
Date: 12/03/2024 14:32
Pain complet 2 x 3.50 7.00
Lait 1L 9.50
Sous-total 16.50
TVA 10% 1.65
TOTAL TTC 18.15 DH
Especes 20.00
Rendu 1.85
Merci de votre visite"""

ENGLISH_RECEIPT = """THE CORNER CAFE
www.cornercafe.com
Receipt #10234
January 15, 2024
Cappuccino $4.50
Blueberry Muffin $3.25
Subtotal $7.75
Tax $0.62
Total $8.37
Card payment 8.37"""

ARABIC_RECEIPT = """سوبر ماركت النور
التاريخ 2024-05-20
خبز 5,00
حليب 12,50
المجموع 17,50 درهم"""

CARREFOUR_RECEIPT = """Bienvenue chez nous
CARREFOUR MARKET MAARIF
Ticket 0042 Caisse 3
15/01/2024
TOTAL 245,90 DH"""


@pytest.fixture
def parser() -> ReceiptTextParser:
    """Create a parser with the default configuration."""
    return ReceiptTextParser()


@pytest.fixture
def french_receipt() -> str:
    return FRENCH_RECEIPT


@pytest.fixture
def english_receipt() -> str:
    return ENGLISH_RECEIPT


@pytest.fixture
def arabic_receipt() -> str:
    return ARABIC_RECEIPT


@pytest.fixture
def carrefour_receipt() -> str:
    return CARREFOUR_RECEIPT


@pytest.fixture
def transcript_dir(tmp_path: Path) -> Path:
    """Write the sample receipts as .txt transcripts into a temp folder."""
    folder = tmp_path / "transcripts"
    folder.mkdir()
    (folder / "atlas.txt").write_text(FRENCH_RECEIPT, encoding="utf-8")
    (folder / "cafe.txt").write_text(ENGLISH_RECEIPT, encoding="utf-8")
    (folder / "carrefour.txt").write_text(CARREFOUR_RECEIPT, encoding="utf-8")
    return folder


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"
