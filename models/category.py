from dataclasses import dataclass


@dataclass
class Category:
    id: int
    name: str
    type: str           # 'income' | 'expense' | 'savings'
    color_hex: str = "#888888"
    is_system: bool = False


@dataclass
class Subcategory:
    id: int
    name: str
    category_name: str
