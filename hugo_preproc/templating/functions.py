"""Named helper functions available to every template.

Each helper takes the value it operates on as its first argument, so the same
callable works as a filter (``{{ file | trim_suffix(".md") }}``) and as a
function (``{{ trim_suffix(file, ".md") }}``).
"""

from __future__ import annotations

import base64
import dataclasses
import hashlib
import json
import re
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Sequence

import yaml

# ----------------------------------------------------------------------
# Strings


def upper(value: Any) -> str:
    return str(value).upper()


def lower(value: Any) -> str:
    return str(value).lower()


def title(value: Any) -> str:
    return str(value).title()


def trim(value: Any, chars: str | None = None) -> str:
    return str(value).strip(chars)


def trim_prefix(value: Any, prefix: str) -> str:
    return str(value).removeprefix(prefix)


def trim_suffix(value: Any, suffix: str) -> str:
    return str(value).removesuffix(suffix)


def replace(value: Any, old: str, new: str, count: int = -1) -> str:
    return str(value).replace(old, new, count)


def split(value: Any, sep: str | None = None, maxsplit: int = -1) -> List[str]:
    return str(value).split(sep, maxsplit)


def join(items: Iterable[Any], sep: str = "") -> str:
    return sep.join(str(item) for item in items)


def contains(value: Any, needle: Any) -> bool:
    return needle in value


def has_prefix(value: Any, prefix: str) -> bool:
    return str(value).startswith(prefix)


def has_suffix(value: Any, suffix: str) -> bool:
    return str(value).endswith(suffix)


def repeat(value: Any, count: int) -> str:
    return str(value) * count


def indent(value: Any, width: int) -> str:
    pad = " " * width
    return "\n".join(pad + line for line in str(value).split("\n"))


def nindent(value: Any, width: int) -> str:
    return "\n" + indent(value, width)


def quote(value: Any) -> str:
    return json.dumps(str(value), ensure_ascii=False)


def squote(value: Any) -> str:
    return f"'{value}'"


def substr(value: Any, start: int, end: int | None = None) -> str:
    return str(value)[start:end]


def trunc(value: Any, length: int) -> str:
    text = str(value)
    return text[:length] if length >= 0 else text[length:]


_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|[^A-Za-z0-9]+")


def _words(value: Any) -> List[str]:
    return [word for word in _WORD_BOUNDARY.split(str(value)) if word]


def snakecase(value: Any) -> str:
    return "_".join(word.lower() for word in _words(value))


def kebabcase(value: Any) -> str:
    return "-".join(word.lower() for word in _words(value))


def camelcase(value: Any) -> str:
    return "".join(word[:1].upper() + word[1:].lower() for word in _words(value))


def urlize(value: Any) -> str:
    """Lowercase slug suitable for a content file name or URL path."""
    return kebabcase(value)


def regex_match(value: Any, pattern: str) -> bool:
    return re.search(pattern, str(value)) is not None


def regex_replace(value: Any, pattern: str, repl: str) -> str:
    return re.sub(pattern, repl, str(value))


def regex_find_all(value: Any, pattern: str, limit: int = -1) -> List[str]:
    found = [match.group(0) for match in re.finditer(pattern, str(value))]
    return found if limit < 0 else found[:limit]


# ----------------------------------------------------------------------
# Collections


def make_list(*items: Any) -> List[Any]:
    return list(items)


def make_dict(*pairs: Any, **kwargs: Any) -> Dict[Any, Any]:
    if len(pairs) % 2:
        raise ValueError("dict expects an even number of key/value arguments")
    result = {pairs[i]: pairs[i + 1] for i in range(0, len(pairs), 2)}
    result.update(kwargs)
    return result


def append(items: Iterable[Any], value: Any) -> List[Any]:
    return [*items, value]


def prepend(items: Iterable[Any], value: Any) -> List[Any]:
    return [value, *items]


def first(items: Sequence[Any]) -> Any:
    return items[0] if items else None


def last(items: Sequence[Any]) -> Any:
    return items[-1] if items else None


def rest(items: Sequence[Any]) -> List[Any]:
    return list(items[1:])


def initial(items: Sequence[Any]) -> List[Any]:
    return list(items[:-1])


def uniq(items: Iterable[Any]) -> List[Any]:
    seen: List[Any] = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


def compact(items: Iterable[Any]) -> List[Any]:
    return [item for item in items if not empty(item)]


def sort_alpha(items: Iterable[Any]) -> List[str]:
    return sorted(str(item) for item in items)


def reverse(items: Iterable[Any]) -> List[Any]:
    return list(items)[::-1]


def keys(mapping: Mapping[Any, Any]) -> List[Any]:
    return list(mapping.keys())


def values(mapping: Mapping[Any, Any]) -> List[Any]:
    return list(mapping.values())


def has(items: Iterable[Any], value: Any) -> bool:
    return value in items


def pluck(items: Iterable[Any], key: str) -> List[Any]:
    """Collect one field from each mapping or record in ``items``."""
    plucked: List[Any] = []
    for item in items:
        if isinstance(item, Mapping):
            if key in item:
                plucked.append(item[key])
        elif hasattr(item, key):
            plucked.append(getattr(item, key))
    return plucked


# ----------------------------------------------------------------------
# Defaults and logic


def empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes, list, tuple, dict, set)):
        return len(value) == 0
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    return False


def default(value: Any, fallback: Any) -> Any:
    return fallback if empty(value) else value


def coalesce(*items: Any) -> Any:
    for item in items:
        if not empty(item):
            return item
    return None


def ternary(condition: Any, if_true: Any, if_false: Any) -> Any:
    return if_true if condition else if_false


# ----------------------------------------------------------------------
# Encoding


def b64enc(value: Any) -> str:
    return base64.b64encode(str(value).encode("utf-8")).decode("ascii")


def b64dec(value: Any) -> str:
    return base64.b64decode(str(value)).decode("utf-8")


def sha256sum(value: Any) -> str:
    return hashlib.sha256(str(value).encode("utf-8")).hexdigest()


def _plain(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {item.name: _plain(getattr(value, item.name)) for item in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def to_json(value: Any, indent: int | None = None) -> str:
    return json.dumps(_plain(value), indent=indent, sort_keys=False, default=str, ensure_ascii=False)


def to_yaml(value: Any) -> str:
    return yaml.safe_dump(_plain(value), sort_keys=False, allow_unicode=True)


# ----------------------------------------------------------------------
# Dates


def now() -> datetime:
    return datetime.now(timezone.utc)


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    return datetime.fromisoformat(str(value))


def date(value: Any, fmt: str = "%Y-%m-%d") -> str:
    return _as_datetime(value).strftime(fmt)


def unix_epoch(value: Any = None) -> int:
    if value is None:
        return int(time.time())
    return int(_as_datetime(value).timestamp())


# ----------------------------------------------------------------------
# Reflection


def field_names(value: Any) -> List[str]:
    """Names of the fields of a record, or the keys of a mapping."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return [item.name for item in dataclasses.fields(value)]
    if isinstance(value, Mapping):
        return [str(key) for key in value.keys()]
    return sorted(name for name in vars(value) if not name.startswith("_"))


FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "upper": upper,
    "lower": lower,
    "title": title,
    "trim": trim,
    "trim_prefix": trim_prefix,
    "trim_suffix": trim_suffix,
    "replace": replace,
    "split": split,
    "join": join,
    "contains": contains,
    "has_prefix": has_prefix,
    "has_suffix": has_suffix,
    "repeat": repeat,
    "indent": indent,
    "nindent": nindent,
    "quote": quote,
    "squote": squote,
    "substr": substr,
    "trunc": trunc,
    "snakecase": snakecase,
    "kebabcase": kebabcase,
    "camelcase": camelcase,
    "urlize": urlize,
    "regex_match": regex_match,
    "regex_replace": regex_replace,
    "regex_find_all": regex_find_all,
    "list": make_list,
    "dict": make_dict,
    "append": append,
    "prepend": prepend,
    "first": first,
    "last": last,
    "rest": rest,
    "initial": initial,
    "uniq": uniq,
    "compact": compact,
    "sort_alpha": sort_alpha,
    "reverse": reverse,
    "keys": keys,
    "values": values,
    "has": has,
    "pluck": pluck,
    "empty": empty,
    "default": default,
    "coalesce": coalesce,
    "ternary": ternary,
    "b64enc": b64enc,
    "b64dec": b64dec,
    "sha256sum": sha256sum,
    "to_json": to_json,
    "to_yaml": to_yaml,
    "now": now,
    "date": date,
    "unix_epoch": unix_epoch,
    "fields": field_names,
}

__all__ = ["FUNCTIONS"]
