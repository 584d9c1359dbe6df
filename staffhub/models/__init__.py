# Models package - typed records of the hosted backend tables
from staffhub.models.company import Company, CompanyStatus
from staffhub.models.employee import Employee
from staffhub.models.communication import CommunicationLog, MessageAnalysis, MessageStatus
from staffhub.models.user import UserProfile
from staffhub.models.credential import UserCredential
