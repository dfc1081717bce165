"""HTTP server hosting the calculator dispatcher."""
from pydantic import BaseModel, ConfigDict, Field, IPvAnyAddress
import uvicorn

from calculator_rpc.common.logger import configure_logging, logger
from calculator_rpc.server.app import create_app
from calculator_rpc.server.dispatcher import Dispatcher


class CalculatorServer(BaseModel):
    """
    Serve the binary calculator RPC over HTTP.

    Features:
        - One route per operation name (``/add``, ``/subtract``), 404 for anything else.
        - Request and reply bodies are protobuf messages.
        - Scheduling and connection handling are left to uvicorn.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    host: IPvAnyAddress = Field(default="127.0.0.1", description="Server host address")
    port: int = Field(default=9000, ge=1, le=65535, description="Server TCP port")
    log_level: str = Field(default="INFO", description="Logging level name")
    dispatcher: Dispatcher = Field(default_factory=Dispatcher, description="Operation dispatcher")

    def start(self) -> None:
        """
        Start serving until interrupted.

        :return: None
        """
        configure_logging(self.log_level)
        logger.info(f"🖥️ Starting server on {self.host}:{self.port}")
        logger.info(f"🖥️ Operations: {', '.join(sorted(self.dispatcher.operations))}")
        uvicorn.run(
            create_app(self.dispatcher),
            host=str(self.host),
            port=self.port,
            log_level=self.log_level.lower(),
        )
