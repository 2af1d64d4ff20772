"""Conversation engine for the add-shop and find-shops dialogs."""

import html
import logging
from dataclasses import dataclass

from shop_finder.domain.dialogs import (
    Action,
    DialogSession,
    RadiusParsed,
    Step,
    parse_radius,
)
from shop_finder.domain.geo import Coordinate, distance_between
from shop_finder.domain.shops import (
    SERVICE_TYPES,
    NewShop,
    RankedShop,
    ShopRecord,
    normalize_shop_type,
)
from shop_finder.services.geocoding import GeocodeFound, GeocodeService
from shop_finder.services.session_store import SessionStore
from shop_finder.services.shops import ShopDirectory

RADIUS_CHOICES = (25, 50, 150)
RESULT_LIMIT = 5

_UNAUTHORIZED = "Unauthorized: only admins can add shops."
_INVALID_ZIP = "Invalid ZIP code. Operation canceled."
_SHOP_ADDED = "Shop added successfully!"
_GENERIC_FAILURE = "Sorry, an error occurred. Please try again later."

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DialogPrompt:
    """Represents the next user-facing message."""

    text: str
    reply_markup: dict | None = None
    parse_mode: str | None = None


def _reply_keyboard(options: list[str]) -> dict:
    return {
        "keyboard": [[option] for option in options],
        "one_time_keyboard": True,
    }


_STEP_PROMPTS: dict[tuple[Action, Step], DialogPrompt] = {
    (Action.ADD_SHOP, Step.NAME): DialogPrompt(text="Enter shop name:"),
    (Action.ADD_SHOP, Step.STREET): DialogPrompt(text="Enter street address:"),
    (Action.ADD_SHOP, Step.CITY): DialogPrompt(text="Enter city:"),
    (Action.ADD_SHOP, Step.STATE): DialogPrompt(text="Enter state:"),
    (Action.ADD_SHOP, Step.ZIP): DialogPrompt(text="Enter ZIP code:"),
    (Action.ADD_SHOP, Step.TYPE): DialogPrompt(
        text=f"Enter service type ({', '.join(SERVICE_TYPES)}):"
    ),
    (Action.FIND_SHOPS, Step.ZIP): DialogPrompt(text="Enter a US ZIP code:"),
    (Action.FIND_SHOPS, Step.RADIUS): DialogPrompt(
        text="Select radius (25, 50, or 150 miles):",
        reply_markup=_reply_keyboard([str(miles) for miles in RADIUS_CHOICES]),
    ),
    (Action.FIND_SHOPS, Step.TYPE): DialogPrompt(
        text="Select service type:",
        reply_markup=_reply_keyboard(list(SERVICE_TYPES)),
    ),
}


def rank_nearby(
    origin: Coordinate,
    shops: list[ShopRecord],
    radius_miles: int | None,
    limit: int = RESULT_LIMIT,
) -> list[RankedShop]:
    """Return shops within the radius (inclusive), nearest first."""
    if radius_miles is None:
        return []
    ranked = [
        RankedShop(shop=shop, distance_miles=distance_between(origin, shop.coordinate))
        for shop in shops
    ]
    within = [hit for hit in ranked if hit.distance_miles <= radius_miles]
    within.sort(key=lambda hit: hit.distance_miles)
    return within[:limit]


@dataclass
class ConversationService:
    """Per-chat state machine driving the shop dialogs.

    Each inbound message advances the chat's session by exactly one step or
    ends it. State is only committed when the stored session is still the one
    the message started from, so a trigger command sent while a step awaits
    I/O replaces the in-flight dialog.
    """

    session_store: SessionStore
    geocode_service: GeocodeService
    shop_directory: ShopDirectory
    admin_ids: frozenset[int] = frozenset()

    def is_admin(self, user_id: int) -> bool:
        return user_id in self.admin_ids

    def start_add_shop(self, chat_id: int, user_id: int) -> DialogPrompt:
        """Begin the add-shop dialog for an admin."""
        if not self.is_admin(user_id):
            _logger.info("Rejected addshop from user_id=%s", user_id)
            return DialogPrompt(text=_UNAUTHORIZED)
        return self._start(chat_id, Action.ADD_SHOP)

    def start_find_shops(self, chat_id: int) -> DialogPrompt:
        """Begin the find-shops dialog."""
        return self._start(chat_id, Action.FIND_SHOPS)

    async def handle_text(self, chat_id: int, text: str) -> DialogPrompt | None:
        """Consume text as input for the chat's current step.

        Returns None when the chat has no dialog in progress.
        """
        session = self.session_store.get(chat_id)
        if session is None:
            return None
        try:
            return await self._handle_step(chat_id, session, text)
        except Exception:
            _logger.exception(
                "Dialog step failed for chat_id=%s (%s/%s)",
                chat_id,
                session.action.value,
                session.step.value,
            )
            self._finish(chat_id, session)
            return DialogPrompt(text=_GENERIC_FAILURE)

    def _start(self, chat_id: int, action: Action) -> DialogPrompt:
        session = DialogSession.start(action)
        self.session_store.put(chat_id, session)
        return _STEP_PROMPTS[(action, session.step)]

    async def _handle_step(
        self, chat_id: int, session: DialogSession, text: str
    ) -> DialogPrompt | None:
        if session.step is Step.ZIP:
            return await self._handle_zip(chat_id, session, text)
        if session.step is Step.RADIUS:
            return self._handle_radius(chat_id, session, text)
        if session.step is Step.TYPE:
            if session.action is Action.ADD_SHOP:
                return self._save_shop(chat_id, session, text)
            return self._search(chat_id, session, text)
        # name, street, city and state are stored verbatim
        updated = session.advance(**{session.step.value: text})
        return self._advance(chat_id, session, updated)

    async def _handle_zip(
        self, chat_id: int, session: DialogSession, text: str
    ) -> DialogPrompt | None:
        zip_code = text.strip()
        result = await self.geocode_service.resolve(zip_code)
        if not isinstance(result, GeocodeFound):
            if not self._finish(chat_id, session):
                return None
            return DialogPrompt(text=_INVALID_ZIP)
        updated = session.advance(
            zip=zip_code, lat=result.coordinate.lat, lon=result.coordinate.lon
        )
        return self._advance(chat_id, session, updated)

    def _handle_radius(
        self, chat_id: int, session: DialogSession, text: str
    ) -> DialogPrompt | None:
        parsed = parse_radius(text)
        radius = parsed.miles if isinstance(parsed, RadiusParsed) else None
        if radius is None:
            _logger.info("Unparseable radius %r for chat_id=%s", text, chat_id)
            radius_text = text.strip()
        else:
            radius_text = str(radius)
        updated = session.advance(radius=radius, radius_text=radius_text)
        return self._advance(chat_id, session, updated)

    def _save_shop(
        self, chat_id: int, session: DialogSession, text: str
    ) -> DialogPrompt | None:
        data = session.data
        shop = NewShop(
            name=str(data["name"]),
            street=str(data["street"]),
            city=str(data["city"]),
            state=str(data["state"]),
            zip_code=str(data["zip"]),
            shop_type=normalize_shop_type(text),
            coordinate=Coordinate(lat=float(data["lat"]), lon=float(data["lon"])),
        )
        self.shop_directory.add_shop(shop)
        self._finish(chat_id, session)
        return DialogPrompt(text=_SHOP_ADDED)

    def _search(
        self, chat_id: int, session: DialogSession, text: str
    ) -> DialogPrompt | None:
        data = session.data
        shop_type = normalize_shop_type(text)
        origin = Coordinate(lat=float(data["lat"]), lon=float(data["lon"]))
        radius = data.get("radius")
        candidates = self.shop_directory.find_by_type(shop_type)
        results = rank_nearby(
            origin, candidates, radius if isinstance(radius, int) else None
        )
        self._finish(chat_id, session)
        if not results:
            radius_text = data["radius_text"]
            if not radius_text:
                return DialogPrompt(text="No shops found within that radius.")
            return DialogPrompt(text=f"No shops found within {radius_text} miles.")
        return DialogPrompt(
            text=_format_results(shop_type, str(data["zip"]), int(radius), results),
            parse_mode="HTML",
        )

    def _advance(
        self, chat_id: int, current: DialogSession, updated: DialogSession
    ) -> DialogPrompt | None:
        if self.session_store.get(chat_id) is not current:
            _logger.info("Dialog for chat_id=%s was replaced mid-step", chat_id)
            return None
        self.session_store.put(chat_id, updated)
        return _STEP_PROMPTS[(updated.action, updated.step)]

    def _finish(self, chat_id: int, current: DialogSession) -> bool:
        if self.session_store.get(chat_id) is not current:
            return False
        self.session_store.delete(chat_id)
        return True


def _format_results(
    shop_type: str, zip_code: str, radius: int, results: list[RankedShop]
) -> str:
    """Format a ranked result list as Telegram HTML."""
    title = shop_type[:1].upper() + shop_type[1:]
    lines = [
        f"🔧 <b>{html.escape(title)}s near {html.escape(zip_code)} ({radius}mi):</b>"
    ]
    for index, hit in enumerate(results, start=1):
        shop = hit.shop
        lines.append(
            f"{index}. <b>{html.escape(shop.name)}</b> - "
            f"{html.escape(shop.street)}, {html.escape(shop.city)} "
            f"({hit.distance_miles:.1f} mi)"
        )
    return "\n".join(lines)
