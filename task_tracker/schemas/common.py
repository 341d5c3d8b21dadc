"""
Response Envelope Schemas - Shared success/error wrappers for every endpoint
"""

from pydantic import BaseModel
from typing import Any, Dict, Generic, Optional, TypeVar

DataT = TypeVar("DataT")

class ApiResponse(BaseModel, Generic[DataT]):
    """{"success": true, "data": ..., "meta": ...}"""
    success: bool = True
    data: DataT
    meta: Optional[Dict[str, Any]] = None

def success(data: Any, meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Wrap endpoint output in the success envelope"""
    return {"success": True, "data": data, "meta": meta}
