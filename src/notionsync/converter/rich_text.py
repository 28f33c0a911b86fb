"""Build Notion rich_text arrays from normalised inline tokens.

A text segment looks like::

    {"type": "text", "text": {"content": "hello"},
     "annotations": {"bold": true, ...}}

``annotations`` is only present when something deviates from the default;
inside links ``text`` also carries ``"link": {"url": ...}``.  Inline math
becomes an ``equation`` segment.
"""

from __future__ import annotations

from urllib.parse import urlparse

from notionsync.models import ConversionWarning
from notionsync.utils.text_split import split_string

RICH_TEXT_LIMIT = 2000

# Notion rejects link URLs without one of these schemes.
_LINK_SCHEMES = ("http", "https", "mailto")


def _default_annotations() -> dict:
    return {
        "bold": False,
        "italic": False,
        "strikethrough": False,
        "underline": False,
        "code": False,
        "color": "default",
    }


def _merge_annotations(base: dict, **overrides: bool) -> dict:
    merged = dict(base)
    for key, value in overrides.items():
        merged[key] = merged.get(key, False) or value
    return merged


def build_rich_text(
    children: list[dict],
    *,
    annotations: dict | None = None,
    href: str | None = None,
    warnings: list[ConversionWarning] | None = None,
) -> list[dict]:
    """Convert inline tokens to a Notion rich_text array.

    Parameters
    ----------
    children:
        Normalised inline tokens.
    annotations:
        Annotations inherited from an enclosing ``strong`` / ``emphasis`` /
        ``strikethrough`` node.
    href:
        Link URL inherited from an enclosing ``link`` node.
    warnings:
        Receives a ``LINK_DROPPED`` warning for each link whose URL Notion
        would reject (relative paths, anchors); its text is kept unlinked.
    """
    if annotations is None:
        annotations = _default_annotations()

    segments: list[dict] = []

    for token in children:
        token_type = token.get("type", "")

        if token_type in ("text", "html_inline"):
            raw = token.get("raw", "")
            if raw:
                segments.append(_make_text_segment(raw, annotations, href))

        elif token_type in ("strong", "emphasis", "strikethrough"):
            flag = {"strong": "bold", "emphasis": "italic"}.get(token_type, token_type)
            segments.extend(build_rich_text(
                token.get("children", []),
                annotations=_merge_annotations(annotations, **{flag: True}),
                href=href,
                warnings=warnings,
            ))

        elif token_type == "codespan":
            segments.append(_make_text_segment(
                token.get("raw", ""),
                _merge_annotations(annotations, code=True),
                href,
            ))

        elif token_type == "link":
            url = token.get("attrs", {}).get("url", "")
            if url and not is_linkable(url):
                if warnings is not None:
                    warnings.append(ConversionWarning(
                        code="LINK_DROPPED",
                        message=f"Link target is not an absolute URL and was dropped: {url}",
                        context={"url": url},
                    ))
                url = ""
            segments.extend(build_rich_text(
                token.get("children", []),
                annotations=annotations,
                href=url or href,
                warnings=warnings,
            ))

        elif token_type == "image":
            # Inline images have no rich_text form; keep them readable.
            alt = extract_text(token.get("children", []))
            url = token.get("attrs", {}).get("url", "")
            text = f"[{alt}]({url})" if alt and url else (url or alt or "[image]")
            segments.append(_make_text_segment(text, annotations, href))

        elif token_type == "inline_math":
            segments.append({
                "type": "equation",
                "equation": {"expression": token.get("raw", "")},
            })

        elif token_type == "softbreak":
            segments.append(_make_text_segment(" ", annotations, href))

        elif token_type == "linebreak":
            segments.append(_make_text_segment("\n", annotations, href))

    return segments


def is_linkable(url: str) -> bool:
    """Return ``True`` if Notion accepts *url* as a rich_text link.

    >>> is_linkable("https://example.com"), is_linkable("./other.md")
    (True, False)
    """
    return urlparse(url).scheme in _LINK_SCHEMES


def split_rich_text(segments: list[dict], limit: int = RICH_TEXT_LIMIT) -> list[dict]:
    """Split text segments longer than *limit* into several segments.

    Annotations and links are copied onto every piece; equation segments
    pass through untouched.
    """
    output: list[dict] = []

    for segment in segments:
        if segment.get("type") != "text":
            output.append(segment)
            continue

        content = segment.get("text", {}).get("content", "")
        if len(content) <= limit:
            output.append(segment)
            continue

        for chunk in split_string(content, limit):
            piece: dict = {"type": "text", "text": {"content": chunk}}
            if "annotations" in segment:
                piece["annotations"] = dict(segment["annotations"])
            if "link" in segment["text"]:
                piece["text"]["link"] = dict(segment["text"]["link"])
            output.append(piece)

    return output


def extract_text(children: list[dict]) -> str:
    """Recursively extract plain text from inline tokens."""
    parts: list[str] = []
    for token in children:
        if token.get("type") == "text":
            parts.append(token.get("raw", ""))
        elif "children" in token:
            parts.append(extract_text(token["children"]))
        elif "raw" in token:
            parts.append(token["raw"])
    return "".join(parts)


def _make_text_segment(
    content: str,
    annotations: dict,
    href: str | None = None,
) -> dict:
    seg: dict = {
        "type": "text",
        "text": {"content": content},
    }
    if annotations != _default_annotations():
        seg["annotations"] = dict(annotations)
    if href:
        seg["text"]["link"] = {"url": href}
    return seg
