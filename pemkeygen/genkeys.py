#!/usr/bin/env python3
import argparse
import asyncio
import logging
from dataclasses import dataclass, replace
from pathlib import Path

from pemkeygen import config, curves, encoder, framer, writer
from pemkeygen.errors import (
    KeyDecodeError,
    KeygenError,
    UnsupportedAlgorithmError,
)
from pemkeygen.generator import generate
from pemkeygen.models import (
    PEM_LABELS,
    Algorithm,
    BlobStructure,
    EncodedBlob,
    FrameMode,
    KeyPair,
    Output,
    PrivateKeyFormat,
)

logger: logging.Logger = logging.getLogger(__name__)

LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class KeygenRequest:
    algorithm: Algorithm = Algorithm.RSA
    key_size: int = 2048
    curve: str = "secp256r1"
    private_format: PrivateKeyFormat = PrivateKeyFormat.PKCS1
    mode: FrameMode = FrameMode.PEM
    private_path: Path = Path("zprv.key")
    public_path: Path = Path("zpub.key")
    check: bool = False


def _encode(
    request: KeygenRequest, key_pair: KeyPair
) -> tuple[EncodedBlob, EncodedBlob]:
    if request.mode == FrameMode.HEX and key_pair.algorithm == Algorithm.EC:
        return encoder.encode_raw(key_pair)
    return (
        encoder.encode_private(key_pair, request.private_format),
        encoder.encode_public(key_pair),
    )


def verify_outputs(
    key_pair: KeyPair, private_output: Output, public_output: Output
) -> None:
    """Decode PEM outputs and confirm they reproduce ``key_pair``."""
    label, private_der = framer.unframe(private_output.text)
    _, public_der = framer.unframe(public_output.text)
    if label == PEM_LABELS[BlobStructure.PKCS8]:
        identifier: tuple[str, str | None] = encoder.private_key_algorithm(
            private_der
        )
        if identifier != encoder.algorithm_oids(key_pair):
            raise KeyDecodeError(
                "Private key output names the wrong algorithm or curve"
            )
    if not encoder.same_key(encoder.decode_private(private_der), key_pair):
        raise KeyDecodeError("Private key output does not match the key")
    if encoder.decode_public(public_der) != key_pair.public_numbers:
        raise KeyDecodeError("Public key output does not match the key")
    logger.debug("Decoded outputs match the generated key")


def build_outputs(request: KeygenRequest) -> tuple[Output, Output]:
    key_pair: KeyPair = generate(
        request.algorithm, key_size=request.key_size, curve=request.curve
    )
    private_blob, public_blob = _encode(request, key_pair)
    private_output: Output = framer.frame(private_blob, request.mode)
    public_output: Output = framer.frame(public_blob, request.mode)
    if request.check and request.mode == FrameMode.PEM:
        verify_outputs(key_pair, private_output, public_output)
    return private_output, public_output


async def generate_and_save_key_pair(
    request: KeygenRequest,
) -> tuple[Output, Output]:
    private_output, public_output = build_outputs(request)
    await writer.write_key_pair(
        request.private_path,
        request.public_path,
        private_output,
        public_output,
    )
    return private_output, public_output


def build_parser(settings: config.Settings) -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="pemkeygen", description="Generate an RSA or EC keypair"
    )
    parser.add_argument(
        "-a",
        "--keyalg",
        type=str.lower,
        choices=[algorithm.value for algorithm in Algorithm],
        default=settings.keyalg,
        help="Key algorithm",
    )
    parser.add_argument(
        "-l",
        "--keysize",
        type=int,
        default=settings.keysize,
        help="RSA modulus size in bits",
    )
    parser.add_argument(
        "-c", "--curve", type=str, default=settings.curve, help="EC curve"
    )
    parser.add_argument(
        "-o",
        "--prvout",
        type=str,
        default=settings.prvout,
        help="Private key output file",
    )
    parser.add_argument(
        "-O",
        "--pubout",
        type=str,
        default=settings.pubout,
        help="Public key output file",
    )
    parser.add_argument(
        "--head",
        type=str,
        default=None,
        help="Write <head>.prv.pem and <head>.pub.pem instead",
    )
    parser.add_argument(
        "--pkcs",
        type=int,
        choices=[1, 5, 8],
        default=settings.pkcs,
        help="Private key structure (1 and 5 mean PKCS#1)",
    )
    parser.add_argument(
        "--hex",
        action="store_true",
        default=settings.hex,
        help="Write hexadecimal instead of PEM",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        default=False,
        help="Decode the PEM outputs and verify them before writing",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Debug logging",
    )
    parser.add_argument(
        "--list-curves",
        action="store_true",
        default=False,
        help="List supported curves and exit",
    )
    return parser


def request_from_args(args: argparse.Namespace) -> KeygenRequest:
    private_path: Path = Path(args.prvout)
    public_path: Path = Path(args.pubout)
    if args.head:
        private_path = Path(f"{args.head}.prv.pem")
        public_path = Path(f"{args.head}.pub.pem")
    try:
        algorithm: Algorithm = Algorithm(str(args.keyalg).lower())
    except ValueError as err:
        raise UnsupportedAlgorithmError(
            f"Unsupported algorithm {args.keyalg!r}"
        ) from err
    request: KeygenRequest = KeygenRequest(
        algorithm=algorithm,
        key_size=args.keysize,
        curve=args.curve,
        private_format=PrivateKeyFormat.from_option(args.pkcs),
        mode=FrameMode.HEX if args.hex else FrameMode.PEM,
        private_path=private_path,
        public_path=public_path,
        check=args.check,
    )
    if (
        request.algorithm == Algorithm.EC
        and request.private_format == PrivateKeyFormat.PKCS1
    ):
        logger.debug("PKCS#1 does not apply to EC keys, using PKCS#8")
        request = replace(request, private_format=PrivateKeyFormat.PKCS8)
    return request


def main(argv: list[str] | None = None) -> int:
    settings: config.Settings = config.get_settings()
    args: argparse.Namespace = build_parser(settings).parse_args(argv)
    level: str = "DEBUG" if args.verbose else settings.log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)

    if args.list_curves:
        for name in curves.supported_curves():
            print(name)
        return 0

    try:
        request: KeygenRequest = request_from_args(args)
        asyncio.run(generate_and_save_key_pair(request))
    except KeygenError as err:
        logger.error(f"{err.stage} failed: {err}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
