from pydantic import BaseModel, Field, field_validator
from typing import Literal


class RenderConfig(BaseModel):
    markdown_extensions: list[str] = Field(default_factory=lambda: [".md"])
    html_extension: str = ".html"
    # Python-Markdown extension names, on top of the standard syntax
    extensions: list[str] = Field(default_factory=lambda: ["fenced_code", "tables"])
    image_base: Literal["document", "cwd"] = "document"
    inline_images: bool = True

    @field_validator("markdown_extensions")
    @classmethod
    def _require_extensions(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one markdown extension is required")
        return [v if v.startswith(".") else f".{v}" for v in value]

    @field_validator("html_extension")
    @classmethod
    def _dotted_html_extension(cls, value: str) -> str:
        if not value.strip("."):
            raise ValueError("html_extension must not be empty")
        return value if value.startswith(".") else f".{value}"


class OutputConfig(BaseModel):
    atomic_write: bool = True
    encoding: str = "utf-8"


class ProcessingConfig(BaseModel):
    strict: bool = True


class WatchConfig(BaseModel):
    debounce_seconds: float = Field(default=1.0, ge=0)


class MdBakeConfig(BaseModel):
    render: RenderConfig = Field(default_factory=RenderConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
