"""Exception types for meeting lifecycle and storage."""


class MeetingError(Exception):
    """Base class for meeting failures."""


class MeetingInProgressError(MeetingError):
    def __init__(self):
        super().__init__("A meeting is already in progress")


class NoActiveMeetingError(MeetingError):
    def __init__(self):
        super().__init__("No active meeting")


class MeetingNotFoundError(MeetingError):
    def __init__(self, meeting_id: str):
        super().__init__(f"Meeting not found: {meeting_id}")
        self.meeting_id = meeting_id


class ActionItemNotFoundError(MeetingError):
    def __init__(self, meeting_id: str, item_id: str):
        super().__init__(f"Action item not found: {item_id} (meeting {meeting_id})")
        self.meeting_id = meeting_id
        self.item_id = item_id
