from collections.abc import Iterable
from dataclasses import asdict, fields, is_dataclass
from typing import List, Self

class GoogleSheetsResourceBase():
    """
    Intended to be subclassed by a dataclass but isnt actually a dataclass.
    The field names of the subclasses match the JSON keys of the Sheets API
    so that asdict() is most of the way to a request body.
    """
    @classmethod
    def from_base(cls, base: dict|None = None) -> Self:
        """
        The inverse of to_base().  Responses carry plenty of keys we don't model
        so anything that isn't a field is dropped rather than blowing up __init__.
        """
        names = {f.name for f in fields(cls) if f.init}
        return cls(**{k: v for k, v in dict(base or {}).items() if k in names})

    def to_base(self) -> dict:
        """
        Default just return the dict representation of the object as needed by
        the Sheets API.  Something more complicated can override.
        Call fixup() first to ensure all fields are in correct format.
        """
        self.fixup()
        return asdict(self)

    def trim(self) -> dict:
        """
        Return a 'trimmed' dict of the resource, removing any top level attributes
        that are None or an empty string/container.  Numbers and bools stay as
        0 and False are valid values.
        """
        b = self.to_base()
        for k, v in list(b.items()):
            if v is None or (type(v) not in [int, bool, float] and not v):
                del b[k]
        return b

    def masked(self, paths: List[str], keep: Iterable[str] = ()) -> dict:
        """
        Return only the dotted field paths named in a field mask, plus any top
        level keys in keep.  Used for update requests where the API wants the
        properties object to carry just the fields being changed.
        """
        base = self.to_base()
        out = {k: base[k] for k in keep if k in base}
        for path in paths:
            src, dst = base, out
            *parents, leaf = path.split(".")
            for p in parents:
                src = src.get(p) or {}
                dst = dst.setdefault(p, {})
            dst[leaf] = src.get(leaf)
        return out

    def fixup(self) -> None:
        """
        notify a subclass to do any field adjustments
        """
        pass

    def update_fields(self, **kwargs) -> List[str]:
        """
        Update fields that may be present.
        """
        updated_fields = []
        if is_dataclass(self):
            names = [f.name for f in fields(self)]
            for k, v in kwargs.items():
                if v is not None and k in names:
                    setattr(self, k, v)
                    updated_fields.append(k)
            self.fixup()
        return updated_fields
