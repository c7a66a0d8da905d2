"""
Render report.

Side record of one PDF render: which decorations went on which page, where
each content block was placed, and what happened to every evidence image.
Tests and the form layer read it instead of parsing the PDF.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class ImageStatus(str, Enum):
    RENDERED = "rendered"
    DECODE_FAILED = "decode_failed"
    DRAW_FAILED = "draw_failed"


@dataclass
class ImageOutcome:
    site_index: int
    point_index: int
    proof_index: int
    status: ImageStatus
    error: Optional[str] = None


@dataclass
class PlacedBlock:
    kind: str
    page: int
    y: float
    height: float
    label: str = ""

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass
class Decoration:
    page: int
    watermark: bool
    header_band: bool
    title_block: bool
    # Layers in the order they were painted, bottom first
    sequence: Tuple[str, ...] = ()


@dataclass
class RenderReport:
    pages: int = 0
    decorations: List[Decoration] = field(default_factory=list)
    blocks: List[PlacedBlock] = field(default_factory=list)
    images: List[ImageOutcome] = field(default_factory=list)
    overflows: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def place(self, kind: str, page: int, y: float, height: float, label: str = "") -> PlacedBlock:
        block = PlacedBlock(kind=kind, page=page, y=y, height=height, label=label)
        self.blocks.append(block)
        return block

    def blocks_on(self, page: int) -> List[PlacedBlock]:
        return [b for b in self.blocks if b.page == page]

    def blocks_of(self, kind: str) -> List[PlacedBlock]:
        return [b for b in self.blocks if b.kind == kind]

    @property
    def last_block(self) -> Optional[PlacedBlock]:
        return self.blocks[-1] if self.blocks else None

    @property
    def rendered_images(self) -> int:
        return sum(1 for o in self.images if o.status == ImageStatus.RENDERED)

    @property
    def failed_images(self) -> List[ImageOutcome]:
        return [o for o in self.images if o.status != ImageStatus.RENDERED]
