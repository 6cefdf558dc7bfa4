import argparse
import asyncio
import logging
import sys

from modlink.exception import DeviceConnectionError
from modlink.protocol import ModbusProtocol
from modlink.schema.logging_config_schema import LoggingConfig
from modlink.schema.modlink_config_schema import ModlinkFileConfig
from modlink.util.config_manager import ConfigManager
from modlink.util.logger_config import setup_logging
from modlink.util.logging_noise import quiet_pymodbus_logs
from modlink.util.pubsub.in_memory_pubsub import InMemoryPubSub

logger = logging.getLogger("ModlinkMain")


async def main(
    config_path: str, env_file: str | None = None, log_level: str | None = None, log_to_file: bool | None = None
):
    config: ModlinkFileConfig = ConfigManager.load_modlink_config(config_path, env_file)

    overrides = {k: v for k, v in {"level": log_level, "to_file": log_to_file}.items() if v is not None}
    log_config = LoggingConfig.model_validate(config.logging.model_dump() | overrides)
    setup_logging(log_config)
    quiet_pymodbus_logs(log_config.pymodbus_level_no, log_config.poll_rate_limit_sec)

    logger.info(f"Loaded {len(config.links)} link(s) for device '{config.device.name}' from {config_path}")

    pubsub = InMemoryPubSub(config.pubsub)
    protocol = ModbusProtocol(config.device, pubsub, poll_rate_limit_sec=log_config.poll_rate_limit_sec)

    try:
        status = await protocol.start()
        logger.info(f"{protocol.protocol_name} {protocol.protocol_instance_uri}: {status}")

        protocol.link_all(config.links)

        async for update in pubsub.subscribe():
            logger.info(f"[Update] {update.ref} = {update.value!r}")

    finally:
        logger.info("Shutting down...")
        await protocol.stop()
        await pubsub.close()


def run() -> None:
    parser = argparse.ArgumentParser(description="Poll and write Modbus-linked attributes")
    parser.add_argument("--config", default="res/modlink.yml", help="Path to modlink YAML")
    parser.add_argument("--env_file", default=None, help="Optional .env file for ${VAR} substitution")
    parser.add_argument("--log_level", default=None, help="DEBUG, INFO, WARNING or ERROR (overrides logging.level)")
    parser.add_argument(
        "--log_to_file", action="store_true", default=None, help="Also write a daily rotating log file"
    )
    args = parser.parse_args()

    try:
        asyncio.run(main(args.config, args.env_file, args.log_level, args.log_to_file))
    except KeyboardInterrupt:
        pass
    except DeviceConnectionError as e:
        logger.error(f"Startup aborted: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
