"""
Modèles pydantic des plantes (produits du marketplace).
- SellerInfo: vendeur embarqué (copié tel quel dans les commandes).
- PlantCreate: payload de création validé avant insertion.
"""
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class SellerInfo(BaseModel):
    name: Optional[str] = None
    email: str = Field(min_length=3)
    image: Optional[str] = None


class PlantCreate(BaseModel):
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    price: float = Field(gt=0, allow_inf_nan=False)
    quantity: int = Field(ge=0)
    description: str = ""
    image: Optional[str] = None
    seller: SellerInfo

    @field_validator("name", "category")
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v
