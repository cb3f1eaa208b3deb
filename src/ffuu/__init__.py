from .command import execute_embed, run_embed
from .config import Settings
from .depth import extraction_depths, formatting_depths, with_depth
from .embeds import EmbedRequest, extract_embeds
from .errors import ConfigError, DocumentError, EmbedExecutionError, FfuuError, ParseError
from .pipeline import build_directory, process_document, process_text
from .serialize import format_tokens
from .tokenizer import parse_tag, tokenize
from .tokens import Comment, DocType, Tag, TagKind, Text, Token

__all__ = [
    "Comment",
    "ConfigError",
    "DocType",
    "DocumentError",
    "EmbedExecutionError",
    "EmbedRequest",
    "FfuuError",
    "ParseError",
    "Settings",
    "Tag",
    "TagKind",
    "Text",
    "Token",
    "build_directory",
    "execute_embed",
    "extract_embeds",
    "extraction_depths",
    "format_tokens",
    "formatting_depths",
    "parse_tag",
    "process_document",
    "process_text",
    "run_embed",
    "tokenize",
    "with_depth",
]
