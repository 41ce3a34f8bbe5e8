from typing import Annotated, Any, Dict, Optional, Type, TypeVar
from pydantic import BaseModel, BeforeValidator, Field, ConfigDict

# ObjectId exposed as string
PyObjectId = Annotated[str, BeforeValidator(str)]

T = TypeVar("T", bound="MongoModel")

class MongoModel(BaseModel):
    """
    Base for documents stored in MongoDB. The `_id` key maps to `id` as a string.
    """
    id: Optional[PyObjectId] = Field(default=None, alias="_id")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_mongo(cls: Type[T], doc: Optional[Dict[str, Any]]) -> Optional[T]:
        """Build a model from a stored document, leaving the document untouched."""
        if not doc:
            return None
        fields = {k: v for k, v in doc.items() if k != "_id"}
        return cls(id=doc.get("_id"), **fields)

    def to_mongo(self, exclude_none: bool = False) -> Dict[str, Any]:
        """Dump for storage; an unset id is left out so MongoDB assigns one."""
        doc = self.model_dump(by_alias=True, exclude_none=exclude_none)
        if doc.get("_id") is None:
            doc.pop("_id", None)
        return doc
