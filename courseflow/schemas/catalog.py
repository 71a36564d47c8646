"""
Course catalog schemas for courseflow.

The catalog lists courses and the modules each one contains. It only drives
the course and module pickers; module content is loaded separately.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class ModuleSummary(BaseModel):
    module_id: str = Field(..., validation_alias=AliasChoices("module_id", "moduleId"))
    title: str
    description: str = ""
    icon: Optional[str] = None


class Course(BaseModel):
    course_id: str = Field(..., validation_alias=AliasChoices("course_id", "courseId"))
    title: str
    description: str = ""
    icon: Optional[str] = None
    price: Optional[str] = None
    bg_color: Optional[str] = Field(default=None, validation_alias=AliasChoices("bg_color", "bgColor"))
    modules: list[ModuleSummary] = []
