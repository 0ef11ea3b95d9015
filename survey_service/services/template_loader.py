"""Built-in template loader with caching and validation.

This module loads the survey templates that ship with the service from YAML
files, validates them against the template schema, caches the results, and
seeds them into the database at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from survey_service.config import get_settings
from survey_service.models.template import Template
from survey_service.schemas.template import TemplateDefinition
from survey_service.logging_config import get_logger

logger = get_logger(__name__)


class TemplateNotFoundError(Exception):
    """Raised when a template file is not found."""
    pass


class TemplateValidationError(Exception):
    """Raised when a template file fails validation."""
    pass


class TemplateLoader:
    """Service for loading and caching built-in template definitions.

    Templates are loaded from `<templates_dir>/<id>.yaml` and validated
    against `TemplateDefinition`.
    """

    def __init__(self, templates_dir: Optional[str] = None):
        """Initialize template loader.

        Args:
            templates_dir: Path to templates directory (defaults to settings)
        """
        if templates_dir is None:
            templates_dir = get_settings().templates_dir
        if templates_dir is None:
            # Default to templates/ in project root
            project_root = Path(__file__).parent.parent.parent
            templates_dir = project_root / "templates"

        self.templates_dir = Path(templates_dir)

        if not self.templates_dir.exists():
            logger.warning(f"Templates directory not found: {self.templates_dir}")

    @lru_cache(maxsize=128)
    def load_template(self, template_id: str) -> TemplateDefinition:
        """Load and validate a template from its YAML file.

        Results are cached. Clear with clear_cache() if files change.

        Args:
            template_id: Template slug (YAML filename without .yaml)

        Returns:
            Validated TemplateDefinition

        Raises:
            TemplateNotFoundError: If the file doesn't exist
            TemplateValidationError: If the file is not valid YAML or fails validation
        """
        yaml_path = self.templates_dir / f"{template_id}.yaml"

        if not yaml_path.exists():
            logger.error(f"Template file not found: {yaml_path}")
            raise TemplateNotFoundError(f"Template '{template_id}' not found at {yaml_path}")

        try:
            with open(yaml_path, 'r', encoding='utf-8') as f:
                raw_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error for {template_id}: {e}")
            raise TemplateValidationError(f"Invalid YAML in template '{template_id}': {e}")
        except OSError as e:
            logger.error(f"Error reading template file {yaml_path}: {e}")
            raise TemplateValidationError(f"Error reading template '{template_id}': {e}")

        if not isinstance(raw_data, dict):
            raise TemplateValidationError(f"Template '{template_id}' must be a YAML mapping")

        try:
            template = TemplateDefinition(**raw_data)
        except ValidationError as e:
            logger.error(f"Validation error for template {template_id}: {e}")
            raise TemplateValidationError(f"Validation failed for template '{template_id}': {e}")

        if template.id != template_id:
            raise TemplateValidationError(
                f"Template id '{template.id}' does not match filename '{template_id}.yaml'"
            )

        logger.info(f"Loaded template: {template_id}")
        return template

    def list_templates(self) -> list[str]:
        """List all available built-in template ids, sorted."""
        if not self.templates_dir.exists():
            return []
        return sorted(f.stem for f in self.templates_dir.glob("*.yaml"))

    def load_all(self) -> list[TemplateDefinition]:
        """Load every built-in template, skipping invalid files with an error log."""
        templates = []
        for template_id in self.list_templates():
            try:
                templates.append(self.load_template(template_id))
            except TemplateValidationError as e:
                logger.error(f"Skipping invalid template {template_id}: {e}")
        return templates

    def clear_cache(self):
        """Clear the template cache."""
        self.load_template.cache_clear()
        logger.info("Template cache cleared")


async def seed_builtin_templates(db: AsyncSession, loader: "TemplateLoader") -> int:
    """Insert built-in templates that are not in the database yet.

    Existing rows are left alone so usage counts survive restarts.

    Returns:
        int: Number of templates inserted
    """
    inserted = 0
    for definition in loader.load_all():
        if await db.get(Template, definition.id) is not None:
            continue
        db.add(Template(
            id=definition.id,
            title=definition.title,
            description=definition.description,
            type=definition.type.value,
            questions=[q.model_dump(mode="json") for q in definition.questions],
            features=list(definition.features),
            time=definition.time,
            usage_count=0,
            builtin=True,
            created_by=None,
        ))
        inserted += 1

    await db.commit()
    if inserted:
        logger.info(f"Seeded {inserted} built-in templates")
    return inserted


# Global singleton instance
_loader_instance: Optional[TemplateLoader] = None


def get_template_loader() -> TemplateLoader:
    """Get global TemplateLoader instance, creating it on first call."""
    global _loader_instance
    if _loader_instance is None:
        _loader_instance = TemplateLoader()
    return _loader_instance
