from typing import TypeAlias

JsonVal: TypeAlias = None | str | int | float | bool | dict[str, "JsonVal"] | list["JsonVal"]

PrimitiveType: TypeAlias = str | int | float | bool
