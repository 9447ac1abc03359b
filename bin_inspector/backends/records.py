"""
Typed views over the JSON answers of the analysis backend.

Only the fields the pipeline reads are declared; everything else the backend
returns is ignored. Shape mismatches surface as ``QueryError``.
"""
from typing import Any, List, Optional, Type, TypeVar

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from bin_inspector.errors import QueryError


class BinaryInfo(BaseModel):
    name: str = ""
    arch: str = ""
    bits: int
    compiler: str = ""
    stripped: bool
    static: bool


class FunctionRecord(BaseModel):
    name: str
    # radare2 reports "addr", rizin and older radare2 releases "offset"
    addr: int = Field(validation_alias=AliasChoices("addr", "offset"))
    cc: int = 0


class SymbolRecord(BaseModel):
    name: str = ""
    flagname: str = ""


class XrefRecord(BaseModel):
    fcn_name: Optional[str] = None
    fcn_addr: Optional[int] = None
    from_addr: Optional[int] = Field(default=None, validation_alias="from")


class SyscallRecord(BaseModel):
    name: str
    addr: int


class EnclosingFunction(BaseModel):
    name: str


Record = TypeVar("Record", bound=BaseModel)


def parse_record(command: str, data: Any, model: Type[Record]) -> Record:
    if not isinstance(data, dict):
        raise QueryError(command, f"expected an object, got {type(data).__name__}")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise QueryError(command, str(e)) from e


def parse_records(command: str, data: Any, model: Type[Record]) -> List[Record]:
    if not isinstance(data, list):
        raise QueryError(command, f"expected a list, got {type(data).__name__}")
    return [parse_record(command, item, model) for item in data]
