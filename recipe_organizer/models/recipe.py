"""Recipe models"""

from typing import List, Literal, Optional

from pydantic import Field, field_validator

from recipe_organizer.models.base import CamelModel, Pagination, RequestModel

Difficulty = Literal["easy", "medium", "hard"]


class RecipeIngredient(RequestModel):
    name: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    unit: str = Field(..., min_length=1)
    notes: Optional[str] = None


class RecipeInstruction(RequestModel):
    step_number: int = Field(..., ge=1)
    instruction: str = Field(..., min_length=1)
    duration: Optional[int] = Field(None, gt=0)
    temperature: Optional[int] = None


class NutritionInfo(RequestModel):
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0
    sugar: float = 0
    sodium: float = 0
    cholesterol: float = 0


class RecipeCreateRequest(RequestModel):
    """Request model for creating a recipe"""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    image_url: Optional[str] = None
    prep_time: int = Field(..., gt=0)
    cook_time: int = Field(..., gt=0)
    servings: int = Field(..., gt=0)
    difficulty: Difficulty = "medium"
    cuisine: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    ingredients: List[RecipeIngredient] = Field(..., min_length=1)
    instructions: List[RecipeInstruction] = Field(..., min_length=1)
    nutrition: NutritionInfo = Field(default_factory=NutritionInfo)
    tags: List[str] = Field(default_factory=list)
    is_public: bool = False

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v


class RecipeUpdateRequest(RequestModel):
    """Request model for updating a recipe; omitted fields are unchanged"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    image_url: Optional[str] = None
    prep_time: Optional[int] = Field(None, gt=0)
    cook_time: Optional[int] = Field(None, gt=0)
    servings: Optional[int] = Field(None, gt=0)
    difficulty: Optional[Difficulty] = None
    cuisine: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    ingredients: Optional[List[RecipeIngredient]] = Field(None, min_length=1)
    instructions: Optional[List[RecipeInstruction]] = Field(None, min_length=1)
    nutrition: Optional[NutritionInfo] = None
    tags: Optional[List[str]] = None
    is_public: Optional[bool] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v


class RecipeResponse(CamelModel):
    id: str
    title: str
    description: str
    image_url: Optional[str] = None
    prep_time: int
    cook_time: int
    servings: int
    difficulty: str
    cuisine: str
    category: str
    ingredients: List[RecipeIngredient]
    instructions: List[RecipeInstruction]
    nutrition: NutritionInfo
    tags: List[str]
    rating: float = 0
    review_count: int = 0
    created_by: str
    is_public: bool
    created_at: str
    updated_at: str


class RecipeListResponse(CamelModel):
    recipes: List[RecipeResponse]
    pagination: Pagination
