"""
Domain mappers package.
Handles transformation between ORM models and DTOs (Data Transfer Objects).
"""

from domain.mappers.profile_mapper import ProfileMapper, FamilyMemberMapper
from domain.mappers.recipe_mapper import RecipeMapper
from domain.mappers.chat_mapper import ChatMapper

__all__ = ["ProfileMapper", "FamilyMemberMapper", "RecipeMapper", "ChatMapper"]
