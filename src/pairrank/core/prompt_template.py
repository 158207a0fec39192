"""Prompt template utilities."""

from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
import warnings
from typing import Any, Optional, Set

from jinja2 import Environment, StrictUndefined, Template, meta

DEFAULT_PACKAGE = "pairrank.prompts"
REQUIRED_VARIABLES = {"entry_circle", "entry_square"}


@dataclass
class PromptTemplate:
    """Simple Jinja2-based prompt template."""

    text: str
    _environment: Environment = field(init=False, repr=False)
    _template: Template = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._environment = Environment(
            undefined=StrictUndefined, keep_trailing_newline=True
        )
        self._template = self._environment.from_string(self.text)

    def render(self, **params: Any) -> str:
        """Render the template with the given parameters."""
        return self._template.render(**params)

    # ------------------------------------------------------------------
    # Loading helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _extract_variables(text: str) -> Set[str]:
        """Return the set of undeclared variables in ``text``."""
        ast = Environment().parse(text)
        return meta.find_undeclared_variables(ast)

    @classmethod
    def from_file(
        cls,
        path: str,
        *,
        reference_filename: Optional[str] = None,
        package: str = DEFAULT_PACKAGE,
    ) -> "PromptTemplate":
        """Load a template from ``path`` with optional variable checking.

        If ``reference_filename`` is provided, the custom template is
        compared against the packaged one.  Leaving out either entry, or
        using variables the caller never supplies, raises ``ValueError``;
        leaving out optional variables only warns.
        """

        text = Path(path).read_text(encoding="utf-8")
        if reference_filename is not None:
            ref_text = resources.files(package).joinpath(reference_filename).read_text(
                encoding="utf-8"
            )
            vars_custom = cls._extract_variables(text)
            vars_ref = cls._extract_variables(ref_text)
            missing = vars_ref - vars_custom
            extra = vars_custom - vars_ref
            if missing or extra:
                parts = []
                if missing:
                    parts.append(f"missing variables: {sorted(missing)}")
                if extra:
                    parts.append(f"unexpected variables: {sorted(extra)}")
                msg = "Custom template variable mismatch (" + "; ".join(parts) + ")"
                missing_required = (REQUIRED_VARIABLES & vars_ref) - vars_custom
                if missing_required or extra:
                    raise ValueError(msg)
                warnings.warn(
                    msg + "; proceeding because required variables are present.",
                    UserWarning,
                    stacklevel=2,
                )
        return cls(text)

    @classmethod
    def from_package(
        cls,
        filename: str,
        package: str = DEFAULT_PACKAGE,
    ) -> "PromptTemplate":
        """Load a template from the given package file."""
        text = resources.files(package).joinpath(filename).read_text(encoding="utf-8")
        return cls(text)


def resolve_template(
    *,
    template: Optional[PromptTemplate],
    template_path: Optional[str],
    reference_filename: str,
    package: str = DEFAULT_PACKAGE,
) -> PromptTemplate:
    """Return a prompt template using either an object or a filesystem override.

    Parameters
    ----------
    template:
        Optional :class:`PromptTemplate` instance supplied directly by the caller.
    template_path:
        Filesystem path to a custom Jinja2 template, validated against
        ``reference_filename``.
    reference_filename:
        Name of the packaged template used when no override is supplied.
    package:
        Package containing the built-in prompt templates.
    """

    if template is not None and template_path is not None:
        raise ValueError("Provide either template or template_path, not both")

    if template_path is not None:
        template = PromptTemplate.from_file(
            template_path,
            reference_filename=reference_filename,
            package=package,
        )

    return template or PromptTemplate.from_package(
        reference_filename,
        package=package,
    )
