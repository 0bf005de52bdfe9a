"""Preference commands: remember the author name, replace the location list."""

from protean import handle
from protean.fields import Text
from protean.utils.globals import current_domain

from unitflow.domain import unitflow
from unitflow.preferences.preferences import DevicePreferences, decode_locations, load_preferences


@unitflow.command(part_of="DevicePreferences")
class RememberAuthor:
    author = Text(required=True, sanitize=False)


@unitflow.command(part_of="DevicePreferences")
class SetLocations:
    locations = Text(required=True, sanitize=False)  # JSON array of location names


@unitflow.command_handler(part_of=DevicePreferences)
class ManagePreferencesHandler:
    @handle(RememberAuthor)
    def remember_author(self, command):
        preferences = load_preferences()
        preferences.remember_author(command.author)
        current_domain.repository_for(DevicePreferences).add(preferences)

    @handle(SetLocations)
    def set_locations(self, command):
        locations = decode_locations(command.locations)
        preferences = load_preferences()
        preferences.set_locations(locations)
        current_domain.repository_for(DevicePreferences).add(preferences)
        return preferences.location_list
