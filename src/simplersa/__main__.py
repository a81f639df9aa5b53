"""The Command Line Interface for the utility, including Interactive elements.

A hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface) that generates the INTERACTIVE part
on-the-fly based on the missing components of the CLI interaction, including the option that none are included.

Typical usage example:

    simplersa demo -p 61 -q 53
    OR
    python -m simplersa
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import sys
import typing

import simplersa

DEMO_MESSAGE = ("This message is encrypted one byte at a time with a public key derived from two small primes, then "
                "decrypted with the matching private key and compared against the original to confirm that every "
                "byte made the round trip unchanged.")


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None
    advanced: bool = False


help_dict: dict[str, HelpData] = {
    "subcommand":
        HelpData(
            description="The available subcommands in SimpleRSA.",
            choices=["keygen", "encrypt", "decrypt", "demo"],
        ),
    "keygen":
        HelpData("Key generation utility."),
    "encrypt":
        HelpData("Encryption utility."),
    "decrypt":
        HelpData("Decryption utility."),
    "demo":
        HelpData("Generates a key pair and round-trips a demonstration message."),
    "p":
        HelpData(
            description="First prime factor. p * q must be greater than 255 and fit in 32 bits.",
            format=int,
        ),
    "q":
        HelpData(
            description="Second prime factor. p * q must be greater than 255 and fit in 32 bits.",
            format=int,
        ),
    "mod":
        HelpData(
            description="Modulus of the key.",
            format=int,
        ),
    "exponent":
        HelpData(
            description="Exponent of the key, public for encryption and private for decryption.",
            format=int,
        ),
    "message":
        HelpData(
            description="Message or path to file containing payload. If Path start with `P:`",
            format=str,
        ),
    "encoding":
        HelpData(description="Payload encoding.", choices=["utf-8", "utf-16", "ascii"], advanced=True, default="utf-8"),
}

needs = {
    "keygen": ("p", "q"),
    "encrypt": ("mod", "exponent", "message", "encoding"),
    "decrypt": ("mod", "exponent", "message", "encoding"),
    "demo": ("p", "q"),
}

primes = argparse.ArgumentParser(add_help=False)
primes.add_argument("-p", type=help_dict["p"].format, help=help_dict["p"].description)
primes.add_argument("-q", type=help_dict["q"].format, help=help_dict["q"].description)
keyparts = argparse.ArgumentParser(add_help=False)
keyparts.add_argument("--mod", "-m", type=help_dict["mod"].format, help=help_dict["mod"].description)
keyparts.add_argument("--exponent", "-x", type=help_dict["exponent"].format, help=help_dict["exponent"].description)
payloads = argparse.ArgumentParser(add_help=False)
payloads.add_argument("--message", type=help_dict["message"].format, help=help_dict["message"].description)
encp = argparse.ArgumentParser(add_help=False)
encp.add_argument("--encoding", "-e", choices=help_dict["encoding"].choices, help=help_dict["encoding"].description)
corep = argparse.ArgumentParser(prog="simplersa")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {simplersa.__version__}")
corep.add_argument("--non-interactive", "-n", action="store_true", help="Enable non-interactive mode")
corep.add_argument("--advanced", "-a", action="store_true", help="Enable advanced mode, for interactive mode")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands")

keygen = commands.add_parser("keygen", parents=[primes], help=help_dict["keygen"].description)
encrypt = commands.add_parser("encrypt", parents=[keyparts, payloads, encp], help=help_dict["encrypt"].description)
decrypt = commands.add_parser("decrypt", parents=[keyparts, payloads, encp], help=help_dict["decrypt"].description)
demo = commands.add_parser("demo", parents=[primes], help=help_dict["demo"].description)


def checkmodes(arg: str, mode: tuple[bool, bool]):
    helper_data = help_dict[arg]
    if (mode[0] or (helper_data.advanced and not mode[1])) and helper_data.default:
        return helper_data.default
    if mode[0]:
        raise IOError(f"Argument {arg} is missing and non-interactive mode is active.")
    return helper_data


def choice_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr(f"Description: {helper_data.description}")
    choices = helper_data.choices
    vald = set(choices)
    for choice in choices:
        defstring = " (Default)" if choice == helper_data.default else ""
        if help_dict.get(choice, None):
            prntr(f"{choice} - {help_dict[choice].description}" + defstring)
        else:
            prntr(f"{choice}" + defstring)
    if helper_data.default is not None:
        prntr("To accept default just click enter. Otherwise specify value.")
    while True:
        ch = input(f"{arg}: ")
        if ch in vald:
            return ch
        if not ch and helper_data.default is not None:
            return helper_data.default
        prntr("Please select an option from the list.")


def input_handler(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    helper_data = checkmodes(arg, mode)
    if not isinstance(helper_data, HelpData):
        return helper_data
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    if helper_data.default is not None:
        prntr(f"Default value: {helper_data.default}")
        prntr("To accept default just click enter. Otherwise specify value.")
    cls = helper_data.format
    while True:
        ch = input(f"{arg}: ")
        if not ch and helper_data.default is not None:
            return helper_data.default
        if ch == "":
            prntr("Please provide a value.")
            continue
        try:
            return cls(ch)
        except ValueError:
            prntr(f"We could not convert your value to {cls.__name__}.")


def check_message(mess: str, enc) -> str:
    """Parse message for path-notice."""
    if mess.startswith("P:"):
        mess = mess[2:]
        with open(mess, "r", encoding=enc) as f:
            mess = f.read()
    return mess


def checked_keys(p: int, q: int) -> simplersa.KeyPair:
    """Validate the primes and generate their keys, exiting with an error message on failure."""
    try:
        simplersa.validate_primes(p, q)
    except ValueError as exc:
        print(exc)
        sys.exit(1)
    ctx = simplersa.RSAContext()
    if not ctx.init(p, q):
        print("Failed to generate the key pair!")
        sys.exit(1)
    return simplersa.KeyPair(ctx.public_key, ctx.private_key)


def main():
    """Core Hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface)"""
    args = corep.parse_args()
    pstatus = (args.non_interactive, args.advanced)

    def pspr(text: str):
        """Print only if not in non-interactive mode."""
        if not pstatus[0]:
            print(text)

    pspr("Welcome to SimpleRSA!\n")
    if not args.subcommand:
        args.subcommand = choice_handler("subcommand", pstatus)
    for reqs in needs[args.subcommand]:
        if getattr(args, reqs, None) is None:
            if help_dict[reqs].choices is not None:
                res = choice_handler(reqs, pstatus)
            else:
                res = input_handler(reqs, pstatus)
            setattr(args, reqs, res)
        else:
            pspr(f"{reqs}: {getattr(args, reqs)}")
    pspr("\nInput Complete! Executing...")
    match args.subcommand:
        case "keygen":
            pub, priv = checked_keys(args.p, args.q)
            pspr("Public key (modulus, exponent):")
            print(f"{pub.mod} {pub.expo}")
            pspr("Private key (modulus, exponent):")
            print(f"{priv.mod} {priv.expo}")
        case "encrypt":
            args.message = check_message(args.message, args.encoding)
            key = simplersa.RSAKey(args.mod, args.exponent)
            ciph = simplersa.encrypt(args.message.encode(args.encoding), key)
            pspr("Ciphertext:")
            print(simplersa.encode_ciphertext(ciph).decode("ascii"))
        case "decrypt":
            args.message = check_message(args.message, "ascii")
            key = simplersa.RSAKey(args.mod, args.exponent)
            clear = simplersa.decrypt(simplersa.decode_ciphertext(args.message.strip()), key)
            pspr("Cleartext:")
            print(clear.decode(args.encoding))
        case "demo":
            pub, priv = checked_keys(args.p, args.q)
            pspr(f"Public key: ({pub.mod}, {pub.expo}), Private key: ({priv.mod}, {priv.expo})")
            payload = DEMO_MESSAGE.encode("ascii")
            clear = simplersa.decrypt(simplersa.encrypt(payload, pub), priv)
            if clear != payload:
                print("RSA Round Trip Failed!")
                sys.exit(1)
            print("RSA Round Trip Passed!")
    pspr("Thank you for using SimpleRSA!")
    pspr("Goodbye!")


if __name__ == "__main__":
    main()
