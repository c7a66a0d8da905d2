# Tests configuration for the inspection report generator
import base64
import sys
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from inspection_report.report.model import Point, Proof, Report, Site


def make_png_data_url(color=(200, 40, 40), size=(64, 40)) -> str:
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


BROKEN_DATA_URL = "data:image/png;base64,AAAA"


@pytest.fixture
def png_data_url():
    """Small red PNG as a data URL."""
    return make_png_data_url()


@pytest.fixture
def png_bytes():
    buf = BytesIO()
    Image.new("RGB", (32, 32), (10, 120, 200)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def photo_urls():
    """Four distinct PNG data URLs."""
    colors = [(200, 40, 40), (40, 200, 40), (40, 40, 200), (200, 200, 40)]
    return [make_png_data_url(c) for c in colors]


@pytest.fixture
def two_site_report(photo_urls):
    """Two sites, several points with captioned photos, long narrative text."""
    def point(n, proofs):
        return Point(
            point=f"Extincteur n°{n}",
            non_conformite="Date de vérification dépassée" if n % 2 else "",
            preuves_text="Plaque constructeur illisible, contrôle visuel uniquement.",
            proofs=proofs,
            action="Remplacement sous 48 h" if n % 2 else "",
        )

    site_a = Site(name="Entrepôt Nord", points=[
        point(1, [Proof(photo_urls[0], "Vue d'ensemble", "before"), Proof(photo_urls[1], "Détail", "after")]),
        point(2, [Proof(photo_urls[2])]),
        point(3, [Proof(photo_urls[3], "Étiquette", "after"), Proof(photo_urls[0])]),
        point(4, []),
    ])
    site_b = Site(name="Bureaux", points=[
        point(5, [Proof(photo_urls[1], "Couloir", "before"), Proof(photo_urls[2], "Sortie", "after")]),
        point(6, [Proof(photo_urls[3])]),
        point(7, [Proof(photo_urls[0], "", "before"), Proof(photo_urls[1])]),
    ])

    items = "".join(f"<li>Observation {i} : <b>élément</b> vérifié</li>" for i in range(12))
    return Report(
        header_code="ENR-QSE-012",
        header_version="3",
        header_title="Rapport de contrôle des moyens de secours",
        client="Société Exemple",
        dates_controle=["2025-10-08", "2025-10-07"],
        sites=[site_a, site_b],
        constatations=f"<p>Constats <span style=\"color: #c00000\">importants</span></p><ul>{items}</ul>",
        recommandations="<ol><li>Former le personnel</li><li>Planifier la maintenance"
                        "<ol><li>Extincteurs</li><li>Alarmes</li></ol></li></ol>",
        controleur="Jean Dupont",
    )
