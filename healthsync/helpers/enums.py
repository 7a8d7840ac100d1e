import enum


class UserRole(enum.Enum):
    DOCTOR = 'doctor'
    PATIENT = 'patient'

class CheckupStatus(enum.Enum):
    UPCOMING = 'upcoming'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

class Operation(enum.Enum):
    READ = 'read'
    CREATE = 'create'
    UPDATE = 'update'
    DELETE = 'delete'

class ResourceType(enum.Enum):
    USER = 'users'
    HEALTH_LOG = 'health_logs'
    PAIRING_LINK = 'doctor_patient_links'
    MESSAGE = 'messages'
    CHECKUP = 'checkups'

class Decision(enum.Enum):
    ALLOW = 'allow'
    DENY = 'deny'

class AlertLevel(enum.Enum):
    WARNING = 'warning'
    INFO = 'info'

class HealthMetric(enum.Enum):
    STEPS = 'steps'
    WATER_ML = 'water_ml'
    HEART_RATE = 'heart_rate'
    SLEEP_HOURS = 'sleep_hours'

class ChangeEvent(enum.Enum):
    INSERT = 'INSERT'
    UPDATE = 'UPDATE'
    DELETE = 'DELETE'
