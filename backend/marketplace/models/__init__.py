from .user import User
from .advisor import Advisor
from .company import Company, CompanyStatus
from .listing import Listing
from .saved_listing import SavedListing

__all__ = ["User", "Advisor", "Company", "CompanyStatus", "Listing", "SavedListing"]
