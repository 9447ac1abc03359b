"""
Report model for one inspected binary.

``Sample`` is frozen: each pipeline stage returns its own result and the
pipeline folds those results into a new ``Sample`` with ``model_copy``.
"""
from typing import FrozenSet, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class Sample(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    arch: str = ""
    bits: int = 0
    compiler: str = ""
    stripped: bool = False
    link_static: bool = False
    sect_header: bool = False
    functions: List[str] = Field(default_factory=list)
    optimized: int = Field(default=0, ge=0, le=100)
    params: FrozenSet[str] = frozenset()
    cff: List[str] = Field(default_factory=list)

    @field_serializer("params")
    def _sorted_params(self, params: FrozenSet[str]) -> List[str]:
        return sorted(params)

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)


def assemble_report(
    sample: Sample,
    functions: Optional[Iterable[str]] = None,
    params: Optional[Iterable[str]] = None,
    cff: Optional[Iterable[str]] = None,
    optimized: Optional[int] = None,
) -> Sample:
    """Copy stage results into a new Sample; fields left as None keep their value."""
    update = {}
    if functions is not None:
        update["functions"] = list(functions)
    if params is not None:
        update["params"] = frozenset(params)
    if cff is not None:
        update["cff"] = list(cff)
    if optimized is not None:
        update["optimized"] = optimized
    return sample.model_copy(update=update)
