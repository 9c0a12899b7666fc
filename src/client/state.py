"""Client-side view state for feeds, the post composer and profile pages.

Each object is owned by one view instance; nothing here is module-level
shared state, so two open profile pages never see each other's drafts.

Write paths reconcile differently:

- creating a post never inserts locally; the owning feed is re-queried so
  the displayed entry carries the server's id and timestamp
- a successful profile save adopts the returned profile as-is, no refetch
"""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

import structlog

from api.v1.schemas.feed import FeedEntryResponse
from api.v1.schemas.post import PostResponse
from api.v1.schemas.profile import ProfileResponse
from client.gateway import IFeedGateway
from core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    InvalidStateTransitionError,
    ProfileNotFoundError,
    ValidationFailedError,
)
from domain.entities.post import POST_CONTENT_MAX_LENGTH
from domain.services.validation import clean_full_name, clean_post_content

logger = structlog.get_logger()


class FeedStatus(StrEnum):
    """Load state of a feed listing."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class EditMode(StrEnum):
    """Profile edit state machine."""

    VIEWING = "viewing"
    EDITING = "editing"
    SAVING = "saving"


class NoticeLevel(StrEnum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notice:
    """A transient message for the user (what a UI shows as a toast)."""

    level: NoticeLevel
    title: str
    message: str


POST_CREATED = Notice(NoticeLevel.SUCCESS, "Success", "Post created successfully!")
POST_FAILED = Notice(NoticeLevel.ERROR, "Error", "Failed to create post. Please try again.")
PROFILE_UPDATED = Notice(NoticeLevel.SUCCESS, "Success", "Profile updated successfully!")
PROFILE_FAILED = Notice(
    NoticeLevel.ERROR, "Error", "Failed to update profile. Please try again."
)
LOGIN_REQUIRED = Notice(NoticeLevel.ERROR, "Error", "You must be logged in to do that.")


@dataclass
class EditDraft:
    """Pending copy of the editable profile fields."""

    full_name: str
    bio: str

    @classmethod
    def from_profile(cls, profile: ProfileResponse) -> "EditDraft":
        return cls(full_name=profile.full_name, bio=profile.bio or "")


class FeedView:
    """The last-fetched feed: global when user_id is None, else one author's."""

    def __init__(self, gateway: IFeedGateway, user_id: UUID | None = None) -> None:
        self._gateway = gateway
        self.user_id = user_id
        self.entries: list[FeedEntryResponse] | None = None
        self.status = FeedStatus.IDLE
        self.error: AppException | None = None

    @property
    def is_empty(self) -> bool:
        """Loaded successfully and there are no posts."""
        return self.status is FeedStatus.READY and not self.entries

    @property
    def is_stale(self) -> bool:
        """The last refresh failed but earlier entries are still shown."""
        return self.status is FeedStatus.FAILED and self.entries is not None

    async def refresh(self) -> bool:
        """Re-run the feed query; returns False if it failed.

        A failure leaves previously loaded entries in place. There is no
        retry. If refreshes overlap, whichever response lands last wins.
        """
        self.status = FeedStatus.LOADING
        try:
            if self.user_id is None:
                entries = await self._gateway.get_global_feed()
            else:
                entries = await self._gateway.get_user_feed(self.user_id)
        except AppException as exc:
            self.status = FeedStatus.FAILED
            self.error = exc
            logger.warning(
                "feed_refresh_failed",
                user_id=str(self.user_id) if self.user_id else None,
                error_code=exc.error_code.value,
            )
            return False

        self.entries = entries
        self.status = FeedStatus.READY
        self.error = None
        return True


class PostComposer:
    """Draft post text plus the create-then-refetch flow."""

    def __init__(self, gateway: IFeedGateway, feed: FeedView) -> None:
        self._gateway = gateway
        self._feed = feed
        self.content = ""
        self.submitting = False
        self.error: ValidationFailedError | None = None
        self.notice: Notice | None = None

    @property
    def char_count(self) -> int:
        return len(self.content)

    @property
    def remaining(self) -> int:
        """Characters left before the limit, counted on trimmed text."""
        return POST_CONTENT_MAX_LENGTH - len(self.content.strip())

    @property
    def can_submit(self) -> bool:
        if self.submitting:
            return False
        try:
            clean_post_content(self.content)
        except ValidationFailedError:
            return False
        return True

    async def submit(self) -> PostResponse | None:
        """Publish the draft. Returns the created post, or None on failure.

        Invalid content is reported inline and never sent. On a server
        failure the draft is kept so the user can retry.
        """
        if self.submitting:
            raise InvalidStateTransitionError("submitting", "submit")

        try:
            clean_post_content(self.content)
        except ValidationFailedError as exc:
            self.error = exc
            return None

        self.error = None
        self.submitting = True
        try:
            post = await self._gateway.create_post(self.content)
        except ValidationFailedError as exc:
            self.error = exc
            return None
        except AuthenticationError:
            self.notice = LOGIN_REQUIRED
            return None
        except AppException as exc:
            logger.warning("post_submit_failed", error_code=exc.error_code.value)
            self.notice = POST_FAILED
            return None
        finally:
            self.submitting = False

        self.content = ""
        self.notice = POST_CREATED
        await self._feed.refresh()
        return post


class ProfileView:
    """State for one profile page: the profile, its posts and edit mode."""

    def __init__(
        self,
        gateway: IFeedGateway,
        user_id: UUID,
        viewer_id: UUID | None = None,
    ) -> None:
        self._gateway = gateway
        self.user_id = user_id
        self.viewer_id = viewer_id
        self.profile: ProfileResponse | None = None
        self.not_found = False
        self.load_error: AppException | None = None
        self.posts = FeedView(gateway, user_id=user_id)
        self.mode = EditMode.VIEWING
        self.draft: EditDraft | None = None
        self.error: ValidationFailedError | None = None
        self.notice: Notice | None = None

    @property
    def is_own_profile(self) -> bool:
        return self.viewer_id is not None and self.viewer_id == self.user_id

    @property
    def post_count(self) -> int:
        return len(self.posts.entries or [])

    async def load(self) -> None:
        """Fetch the profile and the user's posts.

        A missing profile sets ``not_found`` instead of raising; it is an
        empty state, not an error.
        """
        try:
            self.profile = await self._gateway.get_profile(self.user_id)
            self.not_found = False
            self.load_error = None
        except ProfileNotFoundError:
            self.profile = None
            self.not_found = True
        except AppException as exc:
            self.load_error = exc
            logger.warning(
                "profile_load_failed",
                user_id=str(self.user_id),
                error_code=exc.error_code.value,
            )

        await self.posts.refresh()

    def begin_edit(self) -> EditDraft:
        """Enter EDITING with a fresh draft copied from the current profile.

        Calling this while already editing discards unsent changes.
        """
        if self.mode is EditMode.SAVING:
            raise InvalidStateTransitionError(self.mode.value, "begin editing")
        if not self.is_own_profile:
            raise AuthorizationError("Only the owner can edit this profile")
        if self.profile is None:
            raise InvalidStateTransitionError("without a loaded profile", "begin editing")

        self.draft = EditDraft.from_profile(self.profile)
        self.mode = EditMode.EDITING
        self.error = None
        return self.draft

    def cancel_edit(self) -> None:
        """Drop the draft and return to VIEWING; nothing is sent."""
        if self.mode is EditMode.SAVING:
            raise InvalidStateTransitionError(self.mode.value, "cancel")
        self.draft = None
        self.mode = EditMode.VIEWING
        self.error = None

    async def save(self) -> bool:
        """Send the draft. On success adopt the returned profile.

        On failure stay in EDITING with the draft intact.
        """
        if self.mode is not EditMode.EDITING or self.draft is None:
            raise InvalidStateTransitionError(self.mode.value, "save")

        try:
            clean_full_name(self.draft.full_name)
        except ValidationFailedError as exc:
            self.error = exc
            return False

        self.error = None
        self.mode = EditMode.SAVING
        try:
            updated = await self._gateway.update_profile(self.draft.full_name, self.draft.bio)
        except ValidationFailedError as exc:
            self.mode = EditMode.EDITING
            self.error = exc
            return False
        except AppException as exc:
            self.mode = EditMode.EDITING
            logger.warning(
                "profile_save_failed",
                user_id=str(self.user_id),
                error_code=exc.error_code.value,
            )
            self.notice = LOGIN_REQUIRED if isinstance(exc, AuthenticationError) else PROFILE_FAILED
            return False

        self.profile = updated
        self.draft = None
        self.mode = EditMode.VIEWING
        self.notice = PROFILE_UPDATED
        return True
