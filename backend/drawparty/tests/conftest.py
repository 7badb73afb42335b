import pytest

from drawparty.messaging.router import MessageRouter
from drawparty.session.context import RoomSession
from drawparty.tests.helpers import ROOM_CODE, connect_host


@pytest.fixture
def session():
    return RoomSession(ROOM_CODE)


@pytest.fixture
def router(session):
    return MessageRouter(session)


@pytest.fixture
async def host(router):
    return await connect_host(router)
