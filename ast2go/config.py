from dataclasses import dataclass


@dataclass
class Config:
    package_name: str = "main"
    char_signed: bool = False
    indent_with: str = "\t"
