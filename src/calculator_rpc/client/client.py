"""HTTP client for the binary calculator RPC."""
from pathlib import Path
import tarfile
import tempfile
from typing import List
from urllib.parse import quote
import zipfile

import httpx
import py7zr
from pydantic import BaseModel, ConfigDict, Field, FilePath, IPvAnyAddress

from calculator_rpc.common.codec import REPLY_CODEC, REQUEST_CODEC
from calculator_rpc.common.errors import RpcError, UnknownOperation
from calculator_rpc.common.logger import logger
from calculator_rpc.common.messages import PROTOBUF_MEDIA_TYPE, BinaryOperationRequest
from calculator_rpc.common.parser import OperationParser


class CalculatorClient(BaseModel):
    """
    Client calling calculator operations on a running server.

    The client:
    - encodes operands as a protobuf BinaryOperationRequest
    - posts it to ``/<operation>``
    - decodes the BinaryOperationReply
    - can run a whole file of operation lines (plain text or archive) and write the results
    """

    # Immutable, the target server must not change while a batch is running
    model_config = ConfigDict(frozen=True)

    host: IPvAnyAddress = Field(default="127.0.0.1", description="Server host address")
    port: int = Field(default=9000, ge=1, le=65535, description="Server TCP port")
    timeout: float = Field(default=5.0, gt=0, description="Request timeout in seconds")

    @property
    def base_url(self) -> str:
        """Root URL of the server."""
        return f"http://{self.host}:{self.port}"

    def call(self, operation: str, operand_a: int, operand_b: int) -> int:
        """
        Run one operation on the server.

        :param str operation: Operation name, e.g. ``add``
        :param int operand_a: Left-hand operand
        :param int operand_b: Right-hand operand

        :return: The operation result
        :rtype: int
        :raises UnknownOperation: If the server does not know the operation
        :raises RpcError: On transport failures or error statuses
        """
        payload: bytes = REQUEST_CODEC.encode(
            BinaryOperationRequest(operand_a=operand_a, operand_b=operand_b)
        )
        url = f"{self.base_url}/{quote(operation, safe='')}"
        try:
            response = httpx.post(
                url,
                content=payload,
                headers={"Content-Type": PROTOBUF_MEDIA_TYPE},
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            raise RpcError(f"Request to {url} failed: {exc}") from exc

        if response.status_code == 404:
            raise UnknownOperation(operation)
        if response.status_code != 200:
            raise RpcError(f"Server answered {response.status_code}: {response.text}")

        return REPLY_CODEC.decode(response.content).result

    def send_file(self, input_file: FilePath, output_file: Path) -> None:
        """
        Run every operation line of an input file and write the results to an output file.

        Each output line is ``<line> = <result>`` or ``<line> -> ERROR: <message>``.

        :param FilePath input_file: Path to the input file or archive
        :param Path output_file: Path where results will be written

        :return: None
        :raises ValueError: If the archive format is unsupported or contains no .txt file
        """
        if input_file.suffix == ".txt":
            content = input_file.read_text()
        else:
            content = self._extract_archive(input_file)

        lines: List[str] = [line.strip() for line in content.splitlines() if line.strip()]
        logger.info(f"✉️ Sending {len(lines)} operations to {self.base_url}")

        with output_file.open("w", encoding="utf-8") as f_out:
            for line in lines:
                try:
                    parsed = OperationParser.parse(line)
                    result = self.call(parsed.name, parsed.operand_a, parsed.operand_b)
                except (RpcError, ValueError) as exc:
                    logger.error(f"❌ {line!r}: {exc}")
                    f_out.write(f"{line} -> ERROR: {exc}\n")
                else:
                    f_out.write(f"{line} = {result}\n")
                # Keep partial results if the batch is interrupted
                f_out.flush()

    def _extract_archive(self, archive_path: FilePath) -> str:
        """
        Return the content of the first .txt file found in a supported archive.

        Supported formats:
        - .zip
        - .tar.xz
        - .7z

        :param FilePath archive_path: Path to the archive file

        :return: Content of the extracted .txt file
        :rtype: str
        :raises ValueError: If no .txt file is found or format is unsupported
        """
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir_path = Path(tmpdir)

            if archive_path.suffix == ".zip":
                with zipfile.ZipFile(archive_path, "r") as zf:
                    names = [name for name in zf.namelist() if name.endswith(".txt")]
                    if not names:
                        raise ValueError(f"No .txt file found in {archive_path.name}")
                    zf.extract(names[0], path=tmpdir_path)
                    return (tmpdir_path / names[0]).read_text()

            if archive_path.suffixes[-2:] == [".tar", ".xz"]:
                with tarfile.open(archive_path, "r:xz") as tf:
                    members = [m for m in tf.getmembers() if m.name.endswith(".txt")]
                    if not members:
                        raise ValueError(f"No .txt file found in {archive_path.name}")
                    tf.extract(members[0], path=tmpdir_path, filter="data")
                    return (tmpdir_path / members[0].name).read_text()

            if archive_path.suffix == ".7z":
                with py7zr.SevenZipFile(archive_path, mode="r") as archive:
                    names = [name for name in archive.getnames() if name.endswith(".txt")]
                    if not names:
                        raise ValueError(f"No .txt file found in {archive_path.name}")
                    archive.extract(path=tmpdir_path, targets=[names[0]])
                    return (tmpdir_path / names[0]).read_text()

            raise ValueError(f"Unsupported archive format: {archive_path.suffix}")
