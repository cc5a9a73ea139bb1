from __future__ import annotations

from typing import Dict, List, Union

# Lua numbers always surface as float, there is no integer variant.
GenericValue = Union[None, bool, float, str, "GenericMapping", "GenericSequence"]
GenericMapping = Dict[str, GenericValue]
GenericSequence = List[GenericValue]

LoadResult = GenericMapping
