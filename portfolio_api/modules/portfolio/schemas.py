# portfolio_api/modules/portfolio/schemas.py

from typing import List

from pydantic import BaseModel


class PersonalInfo(BaseModel):
    name: str
    title: str
    subtitle: str
    email: str
    phone: str
    location: str
    github: str
    linkedin: str


class AboutInfo(BaseModel):
    summary: str
    cgpa: str
    university: str
    graduationYear: str


class SkillSet(BaseModel):
    programming: List[str]
    frontend: List[str]
    database: List[str]
    tools: List[str]
    softSkills: List[str]


class Language(BaseModel):
    name: str
    level: str


class PortfolioResponse(BaseModel):
    personal: PersonalInfo
    about: AboutInfo
    skills: SkillSet
    languages: List[Language]
