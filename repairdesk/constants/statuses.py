"""Ticket status and priority vocabulary.

Statuses form a closed set for display purposes only: a ticket may carry any
other string, which is shown verbatim with the default badge style.
"""

STATUS_NEW = 'new'
STATUS_IN_PROGRESS = 'in_progress'
STATUS_WAITING_PARTS = 'waiting_parts'
STATUS_READY = 'ready'
STATUS_COMPLETED = 'completed'

ALL_STATUSES = (
    STATUS_NEW,
    STATUS_IN_PROGRESS,
    STATUS_WAITING_PARTS,
    STATUS_READY,
    STATUS_COMPLETED,
)

# Anything not completed counts as open work
OPEN_STATUSES = tuple(s for s in ALL_STATUSES if s != STATUS_COMPLETED)

STATUS_LABELS = {
    STATUS_NEW: 'New',
    STATUS_IN_PROGRESS: 'In Progress',
    STATUS_WAITING_PARTS: 'Waiting for Parts',
    STATUS_READY: 'Ready for Pickup',
    STATUS_COMPLETED: 'Completed',
}

# Tailwind badge classes
STATUS_CLASSES = {
    STATUS_NEW: 'bg-blue-100 text-blue-800',
    STATUS_IN_PROGRESS: 'bg-yellow-100 text-yellow-800',
    STATUS_WAITING_PARTS: 'bg-orange-100 text-orange-800',
    STATUS_READY: 'bg-green-100 text-green-800',
    STATUS_COMPLETED: 'bg-gray-100 text-gray-800',
}
DEFAULT_STATUS_CLASS = 'bg-gray-100 text-gray-800'

PRIORITY_LOW = 'low'
PRIORITY_NORMAL = 'normal'
PRIORITY_HIGH = 'high'
PRIORITY_URGENT = 'urgent'
PRIORITIES = (PRIORITY_LOW, PRIORITY_NORMAL, PRIORITY_HIGH, PRIORITY_URGENT)

PRIORITY_CLASSES = {
    PRIORITY_LOW: 'text-gray-500',
    PRIORITY_NORMAL: 'text-gray-700',
    PRIORITY_HIGH: 'text-orange-600 font-semibold',
    PRIORITY_URGENT: 'text-red-600 font-bold',
}
DEFAULT_PRIORITY_CLASS = 'text-gray-700'

__all__ = [
    'STATUS_NEW', 'STATUS_IN_PROGRESS', 'STATUS_WAITING_PARTS', 'STATUS_READY', 'STATUS_COMPLETED',
    'ALL_STATUSES', 'OPEN_STATUSES', 'STATUS_LABELS', 'STATUS_CLASSES', 'DEFAULT_STATUS_CLASS',
    'PRIORITIES', 'PRIORITY_CLASSES', 'DEFAULT_PRIORITY_CLASS',
]
