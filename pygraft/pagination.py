import dataclasses
from typing import Optional


@dataclasses.dataclass(frozen=True)
class Pagination:
    page_size: int = 2
    default_page: int = 1

    def __post_init__(self):
        if self.page_size < 1:
            raise ValueError('page_size must be positive')
        if self.default_page < 1:
            raise ValueError('default_page must be positive')

    def normalize(self, page: Optional[int]) -> int:
        """Absent, zero and negative pages fall back to the default page"""
        if page is None or page < 1:
            return self.default_page
        return page

    def window(self, page: Optional[int]):
        page = self.normalize(page)
        return (page - 1) * self.page_size, self.page_size
