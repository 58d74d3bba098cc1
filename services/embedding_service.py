"""Best-effort recipe embeddings for the n8n RAG workflow"""

import logging
from typing import Optional
from sqlalchemy.orm import Session

from adapters import openrouter_client
from app.config import settings
from app.exceptions import UpstreamServiceError
from domain.models import Recipe, RecipeEmbedding
from repositories import RecipeEmbeddingRepository

logger = logging.getLogger("mealprep.embeddings")


class EmbeddingService:
    @staticmethod
    def store_recipe_embedding(db: Session, recipe: Recipe) -> Optional[RecipeEmbedding]:
        """
        Embed ``recipe.searchable_text`` and upsert it.

        Disabled by default. Any failure is logged and returns None; recipe
        writes never fail because of embeddings.
        """
        if not settings.embeddings_enabled:
            return None
        text = recipe.searchable_text or recipe.title
        try:
            vector = openrouter_client.embed(text)
        except UpstreamServiceError as e:
            logger.warning(f"embedding_failed recipe_id={recipe.id} error={e}")
            return None

        repo = RecipeEmbeddingRepository(db)
        row = repo.get_for_recipe(recipe.id)
        if row is None:
            row = repo.create(
                RecipeEmbedding(recipe_id=recipe.id, embedding=vector, text_content=text)
            )
        else:
            row.embedding = vector
            row.text_content = text
            row = repo.update(row)
        logger.info(f"embedding_stored recipe_id={recipe.id} dims={len(vector)}")
        return row
