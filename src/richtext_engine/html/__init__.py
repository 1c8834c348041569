"""HTML codec: permissive parser and canonical serializer."""

from .parser import HtmlParser, parse
from .serializer import HtmlSerializer, serialize

__all__ = ["HtmlParser", "HtmlSerializer", "parse", "serialize"]
