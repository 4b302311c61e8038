from __future__ import annotations

import io
import os
import re
from typing import Any, Dict, Iterator, List, Optional, TextIO

import numpy as np

from mandelview.config import codec
from mandelview.util.logging_setup import get_logger

_SECTION_LINE = re.compile(r"^\s*\[([^\]]+)\]\s*$")

# key, then the value which must start with a non-space character
_KEY_VALUE_LINE = re.compile(r"^\s*([^=\s]+)\s*=\s*([^\s].*)?$")

_TRAILING_WS = " \t\f\v\n\r"


class Entry:
    """A single key/value pair. The value is always held as canonical text."""

    def __init__(self, name: str, value: str = "") -> None:
        self.name = name
        self.set_string(value)

    @classmethod
    def of(cls, name: str, value: Any) -> "Entry":
        return cls(name, codec.encode(value))

    def __repr__(self) -> str:
        return f"Entry({self.name!r}, {self.value!r})"

    def set_string(self, value: str) -> None:
        # the file format is one entry per line
        if "\n" in value or "\r" in value:
            raise ValueError(f"value for {self.name!r} must not contain line breaks")
        self.value = value

    def set_bool(self, value: bool) -> None:
        self.value = codec.encode_bool(value)

    def set_int(self, value: int) -> None:
        self.value = codec.encode_int(value)

    def set_float(self, value: float) -> None:
        self.value = codec.encode_float(value)

    def set_vec(self, value) -> None:
        self.value = codec.encode_vec(value)

    def get_string(self) -> str:
        return self.value

    def get_bool(self) -> bool:
        return codec.decode_bool(self.value)

    def get_int(self) -> int:
        return codec.decode_int(self.value)

    def get_float(self) -> float:
        return codec.decode_float(self.value)

    def get_vec2(self) -> np.ndarray:
        return codec.decode_vec2(self.value)

    def get_vec3(self) -> np.ndarray:
        return codec.decode_vec3(self.value)

    def get_vec4(self) -> np.ndarray:
        return codec.decode_vec4(self.value)


class Section:
    """A named block of entries. Keys may repeat; each key keeps insertion order."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._entries: Dict[str, List[Entry]] = {}

    def __repr__(self) -> str:
        return f"Section({self.name!r}, keys={list(self._entries)!r})"

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> List[str]:
        return [k for k, v in self._entries.items() if v]

    def entries(self) -> Iterator[Entry]:
        for entry_list in self._entries.values():
            yield from entry_list

    def get_entries(self, key: str) -> Optional[List[Entry]]:
        entry_list = self._entries.get(key)
        if entry_list is None:
            return None
        return list(entry_list)

    def get_entry(self, key: str) -> Optional[Entry]:
        entry_list = self._entries.get(key)
        if not entry_list:
            return None
        return entry_list[0]

    def add_entry(self, name: str, value: Any) -> Entry:
        entry = Entry.of(name, value)
        self._entries.setdefault(name, []).append(entry)
        return entry

    def set_entry(self, name: str, value: Any) -> Entry:
        entry = Entry.of(name, value)
        self._entries[name] = [entry]
        return entry

    def has_value(self, key: str) -> bool:
        # an explicitly empty value counts as unset
        return len(self.get_string(key)) > 0

    def get_string(self, key: str) -> str:
        entry = self.get_entry(key)
        return entry.get_string() if entry else ""

    def get_bool(self, key: str) -> bool:
        entry = self.get_entry(key)
        return entry.get_bool() if entry else False

    def get_int(self, key: str) -> int:
        entry = self.get_entry(key)
        return entry.get_int() if entry else 0

    def get_float(self, key: str) -> float:
        entry = self.get_entry(key)
        return entry.get_float() if entry else 0.0

    def get_vec2(self, key: str) -> np.ndarray:
        entry = self.get_entry(key)
        return entry.get_vec2() if entry else np.zeros(2, dtype=float)

    def get_vec3(self, key: str) -> np.ndarray:
        entry = self.get_entry(key)
        return entry.get_vec3() if entry else np.zeros(3, dtype=float)

    def get_vec4(self, key: str) -> np.ndarray:
        entry = self.get_entry(key)
        return entry.get_vec4() if entry else np.zeros(4, dtype=float)

    def write(self, out: TextIO, *, header: bool = True) -> None:
        if header:
            out.write(f"[{self.name}]\n")
        for entry in self.entries():
            out.write(f"{entry.name}={entry.value}\n")
        out.write("\n")


class ConfigStore:
    """Sectioned key/value store backed by a line-oriented text file.

    Several sections may share a name; they are kept in the order they
    were added. Structural problems while loading are reported through
    the boolean result of ``load`` and the ``error`` property, never by
    raising.
    """

    def __init__(self, filename: str = "") -> None:
        self.filename = filename
        self._error = ""
        self._sections: Dict[str, List[Section]] = {}

    @property
    def error(self) -> str:
        return self._error

    def clear(self) -> None:
        self._error = ""
        self._sections.clear()

    def __iter__(self) -> Iterator[Section]:
        for section_list in self._sections.values():
            yield from section_list

    def __len__(self) -> int:
        return sum(len(s) for s in self._sections.values())

    def add_section(self, section: Section) -> Section:
        self._sections.setdefault(section.name, []).append(section)
        return section

    def set_section(self, section: Section) -> Section:
        section_list = self._sections.setdefault(section.name, [])
        if section_list:
            section_list[0] = section
        else:
            section_list.append(section)
        return section

    def has_section(self, name: str) -> bool:
        return self.get_section(name) is not None

    def get_sections(self, name: str) -> Optional[List[Section]]:
        section_list = self._sections.get(name)
        if section_list is None:
            return None
        return list(section_list)

    def get_section(self, name: str) -> Optional[Section]:
        section_list = self._sections.get(name)
        if not section_list:
            return None
        return section_list[0]

    def get_entries(self, section: str, key: str) -> Optional[List[Entry]]:
        sec = self.get_section(section)
        if sec is None:
            return None
        return sec.get_entries(key)

    def get_entry(self, section: str, key: str) -> Optional[Entry]:
        sec = self.get_section(section)
        if sec is None:
            return None
        return sec.get_entry(key)

    def has_value(self, section: str, key: str) -> bool:
        return len(self.get_string(section, key)) > 0

    def get_string(self, section: str, key: str) -> str:
        entry = self.get_entry(section, key)
        return entry.get_string() if entry else ""

    def get_bool(self, section: str, key: str) -> bool:
        entry = self.get_entry(section, key)
        return entry.get_bool() if entry else False

    def get_int(self, section: str, key: str) -> int:
        entry = self.get_entry(section, key)
        return entry.get_int() if entry else 0

    def get_float(self, section: str, key: str) -> float:
        entry = self.get_entry(section, key)
        return entry.get_float() if entry else 0.0

    def get_vec2(self, section: str, key: str) -> np.ndarray:
        entry = self.get_entry(section, key)
        return entry.get_vec2() if entry else np.zeros(2, dtype=float)

    def get_vec3(self, section: str, key: str) -> np.ndarray:
        entry = self.get_entry(section, key)
        return entry.get_vec3() if entry else np.zeros(3, dtype=float)

    def get_vec4(self, section: str, key: str) -> np.ndarray:
        entry = self.get_entry(section, key)
        return entry.get_vec4() if entry else np.zeros(4, dtype=float)

    def load(self, filename: Optional[str] = None) -> bool:
        if filename is not None:
            self.filename = filename

        logger = get_logger()
        logger.debug("Loading config file %s", self.filename)

        self.clear()

        if not self.filename:
            return False

        try:
            with open(self.filename, "rb") as f:
                data = f.read()
        except OSError:
            return self._fail(f"failed to open config file {self.filename}")

        sec: Optional[Section] = None
        for lineno, raw in enumerate(data.splitlines(), start=1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError:
                return self._fail(f"failed to read line {lineno} of config file {self.filename}")

            if not line.strip() or line[0] == "#":
                continue

            m = _SECTION_LINE.match(line)
            if m:
                if sec is not None:
                    self.add_section(sec)
                sec = Section(m.group(1))
                continue

            m = _KEY_VALUE_LINE.match(line)
            if m:
                key = m.group(1)
                value = (m.group(2) or "").rstrip(_TRAILING_WS)
                if sec is None:
                    sec = Section("")
                sec.add_entry(key, value)
                logger.debug("%s: [%s] %s => %s", self.filename, sec.name, key, value)
                continue

            return self._fail(f"failed to read line {lineno} of config file {self.filename}")

        if sec is not None:
            self.add_section(sec)

        return True

    def _fail(self, message: str) -> bool:
        self._error = message
        get_logger().warning("%s", message)
        return False

    def dump(self, out: TextIO) -> None:
        # the unnamed section has no header line so it must come first
        for sec in self._sections.get("", []):
            sec.write(out, header=False)
        for sec in self:
            if sec.name:
                sec.write(out)

    def dumps(self) -> str:
        buf = io.StringIO()
        self.dump(buf)
        return buf.getvalue()

    def save(self, filename: Optional[str] = None) -> bool:
        if filename is not None:
            self.filename = filename

        if not self.filename:
            return False

        directory = os.path.dirname(self.filename)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.filename, "w", encoding="utf-8") as f:
                self.dump(f)
        except OSError:
            return self._fail(f"failed to write config file {self.filename}")

        return True
