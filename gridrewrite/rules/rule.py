"""Replacement rules: a find patch paired with a replace patch."""

from dataclasses import dataclass
from typing import List

from ..core.grid import Grid
from ..patterns.patch import WILDCARD, is_degenerate


@dataclass(frozen=True, eq=False)
class ReplacementRule:
    """Rewrite rule applied wherever its find patch matches.

    Attributes:
        find: Patch that must match (WILDCARD matches anything)
        replace: Patch written over the match (WILDCARD leaves cells alone)
        name: Optional label used in logs
    """
    find: Grid
    replace: Grid
    name: str = ""

    def __post_init__(self):
        """Validate the patch pair.

        Raises:
            ValueError: If find and replace differ in dimension or extent
        """
        if self.find.dimension != self.replace.dimension:
            raise ValueError(
                f"Rule {self.label}: find is {self.find.dimension}D but replace is "
                f"{self.replace.dimension}D")
        if self.find.extent != self.replace.extent:
            raise ValueError(
                f"Rule {self.label}: find extent {self.find.extent.axes} doesn't match "
                f"replace extent {self.replace.extent.axes}")

        # the rule owns its patches
        object.__setattr__(self, 'find', self.find.copy())
        object.__setattr__(self, 'replace', self.replace.copy())

    @property
    def label(self) -> str:
        return self.name or f"<{'x'.join(str(a) for a in self.find.extent.axes)} rule>"

    @property
    def dimension(self) -> int:
        return self.find.dimension

    def validation_warnings(self) -> List[str]:
        """Describe legal but suspicious rule shapes.

        Returns:
            List of warnings (empty if the rule looks sane)
        """
        warnings = []

        if is_degenerate(self.find):
            warnings.append(f"Rule {self.label}: find patch is all wildcards and matches everywhere")

        # a match only guarantees concrete find cells are on the grid
        for coord, cell in self.replace.cartesian_iter():
            if cell is not WILDCARD and self.find.cell_at(coord) is WILDCARD:
                warnings.append(
                    f"Rule {self.label}: replace writes at {coord.axes} where find is a "
                    f"wildcard; the write may fall outside the grid")
                break

        return warnings
