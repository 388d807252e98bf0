from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union
from xml.parsers.expat import ExpatError

import xmltodict


def strip_namespace(path, key: str, value: Any):
    """
    xmltodict postprocessor: "ns2:Item" -> "Item", "@xml:lang" -> "@lang",
    xmlns declarations dropped. Element text is never touched.
    """
    if key == "@xmlns" or key.startswith("@xmlns:"):
        return None
    if key.startswith("@"):
        return "@" + key[1:].rpartition(":")[2], value
    return key.rpartition(":")[2], value


@dataclass(frozen=True)
class MwsResponse:
    """
    Either a parsed XML document or the raw response text.

    `document` is None when the body did not look like XML, or looked like
    XML but could not be parsed; `text` always holds the raw body.
    """
    text: str
    document: Optional[dict[str, Any]] = None
    status_code: Optional[int] = None

    @property
    def is_document(self) -> bool:
        return self.document is not None

    @property
    def root_name(self) -> Optional[str]:
        if not self.document:
            return None
        return next(iter(self.document))

    @property
    def parsed(self) -> Any:
        """The root element's content for documents, the raw text otherwise."""
        if self.document is None:
            return self.text
        return self.document[self.root_name]


def looks_like_xml(text: str) -> bool:
    return text.lstrip()[:1] == "<"


def parse_response(
    body: Union[bytes, str],
    status_code: Optional[int] = None,
    encoding: Optional[str] = None,
) -> MwsResponse:
    """
    Build an MwsResponse from a response body.

    Bytes bodies are decoded with `encoding` (the server's declared charset)
    or UTF-8. For XML, undeclared bytes go to the parser as-is so the XML
    declaration picks the encoding; a declared charset wins over it.
    """
    if isinstance(body, bytes):
        text = body.decode(encoding or "utf-8", errors="replace")
        xml_input: Union[bytes, str] = body.lstrip() if encoding is None else text.lstrip()
    else:
        text = body
        xml_input = body.lstrip()

    if not looks_like_xml(text):
        return MwsResponse(text=text, status_code=status_code)

    try:
        document = xmltodict.parse(xml_input, postprocessor=strip_namespace)
    except ExpatError:
        # Leading "<" but not well-formed: hand back the raw body
        return MwsResponse(text=text, status_code=status_code)

    return MwsResponse(text=text, document=document, status_code=status_code)
