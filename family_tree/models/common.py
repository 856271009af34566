from pydantic import BaseModel

class DeletedOut(BaseModel):
    deleted: bool
