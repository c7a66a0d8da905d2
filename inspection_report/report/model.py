"""
Report Data Model.

Report → Sites → Points → Proofs, as edited by the form and rendered by
the PDF engine. Renders always work on a `snapshot()` copy.
"""
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..errors import ReportStructureError


PROOF_POSITIONS = ("before", "after")
DEFAULT_PROOF_POSITION = "after"


@dataclass
class Proof:
    """Evidence image with an optional caption drawn before or after it."""
    src: str
    caption: str = ""
    pos: str = DEFAULT_PROOF_POSITION

    def to_dict(self) -> Dict[str, str]:
        return {"src": self.src, "caption": self.caption, "pos": self.pos}


def normalize_proof(item: Any) -> Optional[Proof]:
    """Normalize a bare image reference or a {src, caption, pos} record.

    Returns None for anything that does not carry an image reference.
    """
    if isinstance(item, Proof):
        src, caption, pos = item.src, item.caption, item.pos
    elif isinstance(item, str):
        src, caption, pos = item, "", DEFAULT_PROOF_POSITION
    elif isinstance(item, dict):
        src = item.get("src")
        caption = item.get("caption") or ""
        pos = item.get("pos") or DEFAULT_PROOF_POSITION
    else:
        return None

    if not isinstance(src, str) or not src:
        return None
    if pos not in PROOF_POSITIONS:
        pos = DEFAULT_PROOF_POSITION
    return Proof(src=src, caption=str(caption), pos=pos)


def dedupe_proofs(items: Iterable[Any]) -> List[Proof]:
    """Normalize proofs and keep the first occurrence of each image."""
    seen = set()
    result = []
    for item in items:
        proof = normalize_proof(item)
        if proof is None or proof.src in seen:
            continue
        seen.add(proof.src)
        result.append(proof)
    return result


@dataclass
class Point:
    point: str = ""
    non_conformite: str = ""
    preuves_text: str = ""
    proofs: List[Proof] = field(default_factory=list)
    action: str = ""

    def add_proofs(self, items: Iterable[Any]) -> List[Proof]:
        """Append proofs, dropping any whose image is already attached."""
        self.proofs = dedupe_proofs([*self.proofs, *items])
        return self.proofs

    def remove_proof(self, index: int) -> None:
        del self.proofs[index]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Point":
        if not isinstance(data, dict):
            raise ReportStructureError(f"Point must be an object, got {type(data).__name__}")
        images = data.get("preuvesImages") or []
        if not isinstance(images, list):
            raise ReportStructureError("preuvesImages must be a list")
        return cls(
            point=_text(data.get("point")),
            non_conformite=_text(data.get("nonConformite")),
            preuves_text=_text(data.get("preuvesText")),
            proofs=dedupe_proofs(images),
            action=_text(data.get("action")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "point": self.point,
            "nonConformite": self.non_conformite,
            "preuvesText": self.preuves_text,
            "preuvesImages": [p.to_dict() for p in self.proofs],
            "action": self.action,
        }


@dataclass
class Site:
    name: str = ""
    points: List[Point] = field(default_factory=list)

    def add_point(self, point: Optional[Point] = None) -> Point:
        point = point or Point()
        self.points.append(point)
        return point

    def remove_point(self, index: int) -> None:
        del self.points[index]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Site":
        if not isinstance(data, dict):
            raise ReportStructureError(f"Site must be an object, got {type(data).__name__}")
        points = data.get("points") or []
        if not isinstance(points, list):
            raise ReportStructureError("Site points must be a list")
        return cls(
            name=_text(data.get("name")),
            points=[Point.from_dict(p) for p in points],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "points": [p.to_dict() for p in self.points]}


@dataclass
class Report:
    header_code: str = ""
    header_version: str = ""
    header_title: str = ""
    client: str = ""
    dates_controle: List[str] = field(default_factory=list)
    sites: List[Site] = field(default_factory=list)
    constatations: str = ""
    recommandations: str = ""
    controleur: str = ""
    logo_data_url: Optional[str] = None

    def __post_init__(self):
        self.dates_controle = normalize_dates(self.dates_controle)

    # --- Editing helpers (form layer) ---

    def add_site(self, name: str = "") -> Site:
        site = Site(name=name, points=[Point()])
        self.sites.append(site)
        return site

    def remove_site(self, index: int) -> None:
        del self.sites[index]

    def add_date(self, iso_date: str) -> None:
        self.dates_controle = normalize_dates([*self.dates_controle, iso_date])

    def remove_date(self, iso_date: str) -> None:
        self.dates_controle = [d for d in self.dates_controle if d != iso_date]

    def snapshot(self) -> "Report":
        """Independent copy handed to the renderer."""
        return copy.deepcopy(self)

    # --- Persisted format ---

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Report":
        """Build a Report from the persisted JSON shape.

        Accepts the legacy shapes: a flat ``points`` list (lifted into one
        unnamed site) and a single ``dateControle`` string.

        Raises:
            ReportStructureError: if the data is not shaped as a report.
        """
        if not isinstance(data, dict):
            raise ReportStructureError(f"Report must be an object, got {type(data).__name__}")

        if "sites" in data and data["sites"] is not None:
            sites_raw = data["sites"]
            if not isinstance(sites_raw, list):
                raise ReportStructureError("sites must be a list")
        elif isinstance(data.get("points"), list):
            sites_raw = [{"name": "", "points": data["points"]}]
        elif data.get("points") is not None:
            raise ReportStructureError("points must be a list")
        else:
            sites_raw = []

        dates = data.get("datesControle")
        if dates is None:
            legacy = data.get("dateControle")
            dates = [legacy] if isinstance(legacy, str) and legacy else []
        if not isinstance(dates, list):
            raise ReportStructureError("datesControle must be a list")

        logo = data.get("logoDataUrl")
        return cls(
            header_code=_text(data.get("headerCode")),
            header_version=_text(data.get("headerVersion")),
            header_title=_text(data.get("headerTitle")),
            client=_text(data.get("client")),
            dates_controle=[d for d in dates if isinstance(d, str)],
            sites=[Site.from_dict(s) for s in sites_raw],
            constatations=_text(data.get("constatations")),
            recommandations=_text(data.get("recommandations")),
            controleur=_text(data.get("controleur")),
            logo_data_url=logo if isinstance(logo, str) and logo else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headerCode": self.header_code,
            "headerVersion": self.header_version,
            "headerTitle": self.header_title,
            "client": self.client,
            "datesControle": list(self.dates_controle),
            "sites": [s.to_dict() for s in self.sites],
            "constatations": self.constatations,
            "recommandations": self.recommandations,
            "controleur": self.controleur,
            "logoDataUrl": self.logo_data_url,
        }


def normalize_dates(dates: Iterable[str]) -> List[str]:
    """Unique, sorted, non-empty ISO date strings."""
    return sorted({d.strip() for d in dates if isinstance(d, str) and d.strip()})


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
