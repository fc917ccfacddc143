"""
Applications resource.

Path: ``Accounts/{AccountSid}/Applications[/{ApplicationSid}].json``
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..operation import Param, ResourceOperation
from ..types import UNSET, Continuation, DeleteStatus, HttpMethod
from ..validation import REQUIRED, MaxLength

if TYPE_CHECKING:
    import concurrent.futures

    from ..client import ResourceClient
    from ..types import Outcome

FRIENDLY_NAME_MAX_LENGTH = 64

APPLICATIONS_PATH = "Accounts/{AccountSid}/Applications.json"
APPLICATION_PATH = "Accounts/{AccountSid}/Applications/{ApplicationSid}.json"


class Application(BaseModel):
    """An application instance."""

    model_config = ConfigDict(extra="allow")

    sid: str
    account_sid: Optional[str] = None
    friendly_name: Optional[str] = None
    api_version: Optional[str] = None
    date_created: Optional[str] = None
    date_updated: Optional[str] = None
    voice_url: Optional[str] = None
    voice_method: Optional[str] = None
    voice_fallback_url: Optional[str] = None
    voice_fallback_method: Optional[str] = None
    voice_caller_id_lookup: Optional[bool] = None
    status_callback: Optional[str] = None
    status_callback_method: Optional[str] = None
    sms_url: Optional[str] = None
    sms_method: Optional[str] = None
    sms_fallback_url: Optional[str] = None
    sms_fallback_method: Optional[str] = None
    uri: Optional[str] = None


class ApplicationResult(BaseModel):
    """A page of applications."""

    model_config = ConfigDict(extra="allow")

    applications: List[Application] = Field(default_factory=list)
    page: Optional[int] = None
    num_pages: Optional[int] = None
    page_size: Optional[int] = None
    total: Optional[int] = None
    start: Optional[int] = None
    end: Optional[int] = None
    uri: Optional[str] = None
    first_page_uri: Optional[str] = None
    next_page_uri: Optional[str] = None
    previous_page_uri: Optional[str] = None
    last_page_uri: Optional[str] = None


@dataclass
class ApplicationOptions:
    """Optional settings for add/update.

    Unset fields are left alone by the server. An empty string is sent as
    is, which clears a previously set URL.
    """

    voice_url: Optional[str] = UNSET
    voice_method: Optional[HttpMethod] = UNSET
    voice_fallback_url: Optional[str] = UNSET
    voice_fallback_method: Optional[HttpMethod] = UNSET
    voice_caller_id_lookup: Optional[bool] = UNSET
    status_callback: Optional[str] = UNSET
    status_callback_method: Optional[HttpMethod] = UNSET
    sms_url: Optional[str] = UNSET
    sms_method: Optional[HttpMethod] = UNSET
    sms_fallback_url: Optional[str] = UNSET
    sms_fallback_method: Optional[HttpMethod] = UNSET


APPLICATION_OPTION_FIELDS = (
    Param("voice_url", "VoiceUrl"),
    Param("voice_method", "VoiceMethod"),
    Param("voice_fallback_url", "VoiceFallbackUrl"),
    Param("voice_fallback_method", "VoiceFallbackMethod"),
    Param("voice_caller_id_lookup", "VoiceCallerIdLookup"),
    Param("status_callback", "StatusCallback"),
    Param("status_callback_method", "StatusCallbackMethod"),
    Param("sms_url", "SmsUrl"),
    Param("sms_method", "SmsMethod"),
    Param("sms_fallback_url", "SmsFallbackUrl"),
    Param("sms_fallback_method", "SmsFallbackMethod"),
)

APPLICATION_SID = Param("application_sid", "ApplicationSid", (REQUIRED,))

GET_APPLICATION = ResourceOperation(
    name="get_application",
    method="GET",
    path_template=APPLICATION_PATH,
    segments=(APPLICATION_SID,),
    result_type=Application,
)

LIST_APPLICATIONS = ResourceOperation(
    name="list_applications",
    method="GET",
    path_template=APPLICATIONS_PATH,
    params=(
        Param("friendly_name", "FriendlyName"),
        Param("page", "Page"),
        Param("page_size", "PageSize"),
    ),
    result_type=ApplicationResult,
)

ADD_APPLICATION = ResourceOperation(
    name="add_application",
    method="POST",
    path_template=APPLICATIONS_PATH,
    params=(
        Param("friendly_name", "FriendlyName", (REQUIRED, MaxLength(FRIENDLY_NAME_MAX_LENGTH))),
    ),
    options=APPLICATION_OPTION_FIELDS,
    result_type=Application,
)

UPDATE_APPLICATION = ResourceOperation(
    name="update_application",
    method="POST",
    path_template=APPLICATION_PATH,
    segments=(APPLICATION_SID,),
    params=(
        Param("friendly_name", "FriendlyName", (MaxLength(FRIENDLY_NAME_MAX_LENGTH),)),
    ),
    options=APPLICATION_OPTION_FIELDS,
    result_type=Application,
)

# Only 204 No Content means the application was removed
DELETE_APPLICATION = ResourceOperation(
    name="delete_application",
    method="DELETE",
    path_template=APPLICATION_PATH,
    segments=(APPLICATION_SID,),
    success_statuses=frozenset(),
    sentinels={204: DeleteStatus.SUCCESS},
    failure_value=DeleteStatus.FAILED,
)


class ApplicationsResource:
    """Application operations bound to a ResourceClient."""

    def __init__(self, client: "ResourceClient"):
        self._client = client

    def get(
        self,
        application_sid: str,
        callback: Optional[Continuation[Application]] = None,
    ) -> "concurrent.futures.Future[Outcome[Application]]":
        """Retrieve one application."""
        return self._client.invoke(
            GET_APPLICATION, callback=callback, application_sid=application_sid
        )

    def list(
        self,
        friendly_name: Optional[str] = UNSET,
        page: Optional[int] = UNSET,
        page_size: Optional[int] = UNSET,
        callback: Optional[Continuation[ApplicationResult]] = None,
    ) -> "concurrent.futures.Future[Outcome[ApplicationResult]]":
        """List applications, optionally filtered by friendly name.

        An empty friendly_name is sent as an empty filter; pass nothing to
        leave the filter off.
        """
        return self._client.invoke(
            LIST_APPLICATIONS,
            callback=callback,
            friendly_name=friendly_name,
            page=page,
            page_size=page_size,
        )

    def add(
        self,
        friendly_name: str,
        options: Optional[ApplicationOptions] = None,
        callback: Optional[Continuation[Application]] = None,
    ) -> "concurrent.futures.Future[Outcome[Application]]":
        """Create an application. friendly_name is required, at most 64 characters."""
        return self._client.invoke(
            ADD_APPLICATION, options=options, callback=callback, friendly_name=friendly_name
        )

    def update(
        self,
        application_sid: str,
        friendly_name: Optional[str] = UNSET,
        options: Optional[ApplicationOptions] = None,
        callback: Optional[Continuation[Application]] = None,
    ) -> "concurrent.futures.Future[Outcome[Application]]":
        """Update the given settings; unset ones are left unchanged.

        An empty friendly_name is sent as is and clears the name on the
        server, the same as empty option values.
        """
        return self._client.invoke(
            UPDATE_APPLICATION,
            options=options,
            callback=callback,
            application_sid=application_sid,
            friendly_name=friendly_name,
        )

    def delete(
        self,
        application_sid: str,
        callback: Optional[Continuation[DeleteStatus]] = None,
    ) -> "concurrent.futures.Future[Outcome[DeleteStatus]]":
        """Delete an application. Succeeds only on 204 No Content."""
        return self._client.invoke(
            DELETE_APPLICATION, callback=callback, application_sid=application_sid
        )


__all__ = [
    "Application",
    "ApplicationResult",
    "ApplicationOptions",
    "ApplicationsResource",
    "APPLICATION_OPTION_FIELDS",
    "GET_APPLICATION",
    "LIST_APPLICATIONS",
    "ADD_APPLICATION",
    "UPDATE_APPLICATION",
    "DELETE_APPLICATION",
]
