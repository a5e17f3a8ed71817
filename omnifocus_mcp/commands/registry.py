"""
Tool registry: maps each tool name to its argument model, script generator
and the way its output is presented.

Command modules register their generators with the :func:`tool` decorator.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Type

from pydantic import ValidationError

from ..omnifocus_api.arguments import ToolArguments
from ..omnifocus_api.errors import ArgumentError, Result
from ..omnifocus_api.formatter import Envelope, format_result
from ..omnifocus_api.script_builder import Script

Generator = Callable[[Any], Script]
PostProcess = Callable[[str, Any], str]


def describe_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        problems.append(f"{location}: {message}" if location else message)
    return "; ".join(problems)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    arguments: Type[ToolArguments]
    generate: Generator
    description: str = ""
    success_prefix: str = ""
    empty_text: Optional[str] = None
    soft_not_found: bool = False
    postprocess: Optional[PostProcess] = None

    def parse(self, arguments: Optional[Mapping[str, Any]]) -> ToolArguments:
        """Validate raw arguments; raises :class:`ArgumentError`."""
        try:
            return self.arguments.model_validate(dict(arguments or {}))
        except ValidationError as exc:
            raise ArgumentError(
                f"Invalid arguments for {self.name}: {describe_validation_error(exc)}"
            ) from None

    def compile(self, arguments: Optional[Mapping[str, Any]]) -> str:
        return self.generate(self.parse(arguments)).render()

    def format(self, result: Result, args: ToolArguments) -> Envelope:
        empty_text = self.empty_text.format(**args.model_dump()) if self.empty_text else None
        postprocess = None
        if self.postprocess is not None:
            postprocess = lambda text: self.postprocess(text, args)  # noqa: E731
        return format_result(
            result,
            success_prefix=self.success_prefix,
            empty_text=empty_text,
            soft_not_found=self.soft_not_found,
            postprocess=postprocess,
        )


TOOLS: Dict[str, ToolSpec] = {}


def tool(name: str, arguments: Type[ToolArguments], **options: Any) -> Callable[[Generator], Generator]:
    """Register the decorated script generator as tool *name*."""

    def decorator(func: Generator) -> Generator:
        doc = (func.__doc__ or "").strip()
        TOOLS[name] = ToolSpec(
            name=name,
            arguments=arguments,
            generate=func,
            description=doc.splitlines()[0] if doc else "",
            **options,
        )
        return func

    return decorator


def get_tool(name: str) -> ToolSpec:
    try:
        return TOOLS[name]
    except KeyError:
        raise ArgumentError(f"Unknown tool: {name}") from None
