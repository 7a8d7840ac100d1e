from typing import Optional, TypeVar, Generic

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str = ''
    data: Optional[T] = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def success_response(self, data: T):
        self.success = True
        self.message = 'Success'
        self.data = data
        return self
