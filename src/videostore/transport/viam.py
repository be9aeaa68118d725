"""Connector backed by the Viam Python SDK (``pip install videostore[viam]``)."""

from __future__ import annotations

from typing import Any, Mapping

from videostore.models.connection import ConnectionParams
from videostore.transport.base import DeviceConnection, DeviceConnector
from videostore.utils.logging import get_logger

logger = get_logger(__name__)


class ViamConnection(DeviceConnection):
    """Wraps a connected ``viam.robot.client.RobotClient``."""

    def __init__(self, robot) -> None:
        self._robot = robot
        self._components: dict[str, object] = {}

    async def resource_names(self) -> list[str]:
        return [resource.name for resource in self._robot.resource_names]

    def _component(self, resource_name: str):
        component = self._components.get(resource_name)
        if component is None:
            from viam.components.generic import Generic

            component = Generic.from_robot(self._robot, resource_name)
            self._components[resource_name] = component
        return component

    async def do_command(
        self,
        resource_name: str,
        command: Mapping[str, Any],
    ) -> Mapping[str, Any]:
        return await self._component(resource_name).do_command(dict(command))

    async def close(self) -> None:
        self._components.clear()
        await self._robot.close()


class ViamConnector(DeviceConnector):
    """Opens API-key authenticated robot clients."""

    @property
    def backend_name(self) -> str:
        return "viam"

    async def connect(self, params: ConnectionParams) -> DeviceConnection:
        from viam.robot.client import RobotClient

        options = RobotClient.Options.with_api_key(
            api_key=params.api_key.get_secret_value(),
            api_key_id=params.api_key_id,
        )
        logger.info(
            "viam_connecting",
            host=params.host,
            machine_id=params.machine_id,
        )
        robot = await RobotClient.at_address(params.host, options)
        logger.info("viam_connected", host=params.host)
        return ViamConnection(robot)
