"""HTTP header blocks with case-insensitive fields."""

from __future__ import annotations


def capitalize(name: str, sep: str) -> str:
    """Capitalize every sep-separated word of a header name."""
    return sep.join(word[:1].upper() + word[1:].lower() for word in name.split(sep))


class Header:
    """A header block: serialized content plus case-insensitive fields."""

    def __init__(self, content: str = "") -> None:
        self.content = content
        self.http_version = ""
        self.fields: dict[str, str] = {}

    def __getitem__(self, key: str) -> str:
        return self.fields.get(key.lower(), "")

    def __setitem__(self, key: str, value: str) -> None:
        self.fields[key.lower()] = value

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self.fields

    def remove(self, key: str) -> None:
        """Drop a field if present."""
        self.fields.pop(key.lower(), None)

    def append(self, key: str, value: str) -> None:
        """Add a value to a field, joining distinct values with a comma."""
        if key in self:
            if self[key] != value:
                self[key] += ", " + value
        else:
            self[key] = value

    def integrate(self) -> None:
        """Append all fields, in name order, and the closing blank line to content."""
        lines = (f"{capitalize(name, '-')}: {value}\r\n" for name, value in sorted(self.fields.items()))
        self.content += "".join(lines) + "\r\n"

    def clear(self) -> None:
        """Remove content and all fields."""
        self.content = ""
        self.fields.clear()


class ResponseHeader(Header):
    """A response header with its status code and reason phrase."""

    def __init__(self, content: str = "") -> None:
        super().__init__(content)
        self.status_code = 200
        self.reason_phrase = "OK"

    def status_line(self) -> str:
        """Return the status line that starts the response."""
        return f"{self.http_version} {self.status_code} {self.reason_phrase}\r\n"

    def clear(self) -> None:
        """Remove content and fields and reset the status to 200 OK."""
        super().clear()
        self.status_code = 200
        self.reason_phrase = "OK"