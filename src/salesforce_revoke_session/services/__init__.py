__all__ = ["SalesforceService"]

from .salesforce import SalesforceService
