"""Stored template listing, creation and usage tracking."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from survey_service.errors import ConflictError, NotFoundError
from survey_service.models.template import Template
from survey_service.schemas.template import TemplateDefinition
from survey_service.logging_config import get_logger

logger = get_logger(__name__)


class TemplateCatalog:
    """Service over the templates table (built-in and user-created)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_templates(self) -> list[Template]:
        """All templates, most used first."""
        result = await self.db.execute(
            select(Template).order_by(Template.usage_count.desc(), Template.id)
        )
        return list(result.scalars().all())

    async def create(self, definition: TemplateDefinition, user_id: int) -> Template:
        """Store a user-created template.

        Raises:
            ConflictError: If a template with the same id exists
        """
        if await self.db.get(Template, definition.id) is not None:
            raise ConflictError("Template already exists")

        template = Template(
            id=definition.id,
            title=definition.title,
            description=definition.description,
            type=definition.type.value,
            questions=[q.model_dump(mode="json") for q in definition.questions],
            features=list(definition.features),
            time=definition.time,
            usage_count=0,
            builtin=False,
            created_by=user_id,
        )
        self.db.add(template)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Template already exists")
        await self.db.refresh(template)

        logger.info(f"Created template {template.id}", extra={"user_id": user_id})
        return template

    async def use(self, template_id: str) -> Template:
        """Record one use of a template and return it with the new count.

        Raises:
            NotFoundError: If no template has this id
        """
        if not await Template.increment_usage(self.db, template_id):
            raise NotFoundError("Template not found")
        await self.db.commit()

        template = await self.db.get(Template, template_id, populate_existing=True)
        return template
