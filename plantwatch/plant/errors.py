class PlantError(Exception):
    """Base error for plant document operations."""


class CompanyNotFoundError(PlantError):
    def __init__(self, company_id: str):
        super().__init__(f"Company not found: {company_id}")
        self.company_id = company_id


class CompanyExistsError(PlantError):
    def __init__(self, company_id: str):
        super().__init__(f"Company already exists: {company_id}")
        self.company_id = company_id


class TableNotFoundError(PlantError):
    def __init__(self, table_id: str):
        super().__init__(f"Table not found: {table_id}")
        self.table_id = table_id
