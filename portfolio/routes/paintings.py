from fastapi import APIRouter, HTTPException, Query
from typing import List, Optional
from portfolio.models.painting import Painting
from portfolio.crud import paintings
from portfolio.utils.string_utils import slugify, split_tags

router = APIRouter()


@router.get("", response_model=List[Painting])
def list_paintings(featured: Optional[bool] = Query(None), tag: Optional[str] = Query(None)):
    """
    Liste publique des œuvres (les plus récentes en premier).
    Filtres optionnels: mises en avant, tag.
    """
    raws = paintings.get_all_paintings(featured=featured)
    if tag:
        wanted = slugify(tag)
        raws = [p for p in raws if wanted in {slugify(t) for t in split_tags(p.get("tags") or "")}]
    return [paintings.serialize_painting(p) for p in raws]


@router.get("/{painting_id}", response_model=Painting)
def get_painting(painting_id: str):
    raw = paintings.get_painting_by_id(painting_id)
    if not raw:
        raise HTTPException(status_code=404, detail="Painting not found")
    return paintings.serialize_painting(raw)
