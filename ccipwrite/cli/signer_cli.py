"""
Signer CLI interface
"""

import cmd
import shlex
import sys
import logging
from typing import Optional

from ..config import env
from ..config.logging_config import setup_logging
from ..core.exceptions import CCIPWriteError
from ..core.types import FieldRecord, Identity, ProtocolScope
from ..crypto.hashing import hex0x
from ..crypto.keygen import compute_extradata
from ..crypto.keys import public_key_from_private
from ..payload.codec import decode, encode_hex
from ..payload.destination import default_destination
from ..payload.gateway import namehash
from ..signing.approval import ApprovalSignature, sign_approval, verify_approval
from ..signing.messages import format_keygen_request
from ..signing.session import SigningSession

logger = logging.getLogger(__name__)


class SignerCLI(cmd.Cmd):
    """Signer CLI interface"""

    intro = 'ccipwrite signer console. Type help or ? to list commands.\n'
    prompt = '(signer) '

    def __init__(self, owner_key: Optional[str] = None):
        super().__init__()
        self.session: Optional[SigningSession] = None
        self.approval: Optional[ApprovalSignature] = None
        self._owner_key = owner_key if owner_key is not None else env.OWNER_PRIVATE_KEY

    def _identity(self, value: str) -> Identity:
        """CAIP-10 identity, or a bare address on the configured chain"""
        if ":" in value:
            return Identity.parse(value)
        return Identity(env.CHAIN_NAMESPACE, env.CHAIN_ID, value)

    def _require_session(self) -> bool:
        if self.session is None or self.session.closed:
            print("No signing session. Use 'derive' first.")
            return False
        return True

    def do_extradata(self, arg):
        """Show keygen extradata: extradata <caip10|address> [password]"""
        try:
            args = shlex.split(arg)
            if not args:
                print("Error: CAIP-10 identity required")
                return
            identity = self._identity(args[0])
            password = args[1] if len(args) > 1 else ""
            extradata = compute_extradata(identity.caip10, password, identity.wallet_address)
            print(hex0x(extradata))
        except (CCIPWriteError, ValueError) as e:
            print(f"Error: {e}")

    def do_keygen(self, arg):
        """Show the keygen request to sign: keygen <origin> <protocol> <caip10|address> [password]"""
        try:
            args = shlex.split(arg)
            if len(args) < 3:
                print("Error: origin, protocol and CAIP-10 identity required")
                return
            identity = self._identity(args[2])
            password = args[3] if len(args) > 3 else ""
            extradata = compute_extradata(identity.caip10, password, identity.wallet_address)
            print(format_keygen_request(args[0], ProtocolScope.parse(args[1]), extradata))
        except (CCIPWriteError, ValueError) as e:
            print(f"Error: {e}")

    def do_derive(self, arg):
        """Open a signing session: derive <caip10|address> <sigKeygen> [password]"""
        try:
            args = shlex.split(arg)
            if len(args) < 2:
                print("Error: CAIP-10 identity and keygen signature required")
                return
            password = args[2] if len(args) > 2 else ""
            if self.session is not None:
                self.session.close()
            self.approval = None
            username = self._identity(args[0]).caip10
            self.session = SigningSession.derive(username, args[1], password)
            print(f"Signer: {self.session.address}")
            print(f"Public Key: {hex0x(self.session.public_key)}")
        except (CCIPWriteError, ValueError) as e:
            print(f"Error deriving signer: {e}")

    def do_approve(self, arg):
        """Approve the session signer with the owner key: approve <origin> <caip10|address>"""
        if not self._require_session():
            return
        if not self._owner_key:
            print("Error: CCIPWRITE_OWNER_PRIVATE_KEY is not set")
            return
        try:
            args = shlex.split(arg)
            if len(args) < 2:
                print("Error: origin and CAIP-10 identity required")
                return
            self.approval = sign_approval(
                self._owner_key,
                args[0],
                self._identity(args[1]),
                self.session.address
            )
            print(f"Approval: {self.approval.signature_hex}")
        except (CCIPWriteError, ValueError) as e:
            print(f"Error approving signer: {e}")

    def do_verify(self, arg):
        """Check the current approval: verify <origin> <caip10|address>"""
        if not self._require_session():
            return
        if self.approval is None:
            print("No approval. Use 'approve' first.")
            return
        try:
            args = shlex.split(arg)
            if len(args) < 2:
                print("Error: origin and CAIP-10 identity required")
                return
            owners = list(env.AUTHORIZED_OWNERS)
            if not owners and self._owner_key:
                owners = [public_key_from_private(self._owner_key)]
            valid = verify_approval(
                self.approval,
                args[0],
                self._identity(args[1]),
                self.session.address,
                owners
            )
            print("Approval: VALID" if valid else "Approval: REJECTED")
        except (CCIPWriteError, ValueError) as e:
            print(f"Error verifying approval: {e}")

    def do_sign(self, arg):
        """Sign a field: sign <origin> <dataType> <value> [timestamp]"""
        if not self._require_session():
            return
        try:
            args = shlex.split(arg)
            if len(args) < 3:
                print("Error: origin, data type and value required")
                return
            timestamp = int(args[3]) if len(args) > 3 else None
            record = FieldRecord.create(args[1], args[2], timestamp)
            signature = self.session.sign_field(args[0], record)
            print(f"Timestamp: {record.timestamp}")
            print(f"Signature: {signature.signature_hex}")
            if self.approval is not None:
                data = encode_hex(
                    self.session.address,
                    signature.signature,
                    self.approval.signature,
                    record.value
                )
                print(f"Data: {data}")
        except (CCIPWriteError, ValueError) as e:
            print(f"Error signing field: {e}")

    def do_encode(self, arg):
        """Encode a payload envelope: encode <signer> <sigData> <approval> <value>"""
        try:
            args = shlex.split(arg)
            if len(args) < 4:
                print("Error: signer, data signature, approval and value required")
                return
            print(encode_hex(args[0], args[1], args[2], args[3]))
        except CCIPWriteError as e:
            print(f"Error encoding payload: {e}")

    def do_decode(self, arg):
        """Decode a payload envelope: decode <hex>"""
        try:
            payload = decode(arg.strip())
            print(f"Signer: {payload.signer}")
            print(f"Data Signature: {hex0x(payload.data_signature)}")
            print(f"Approval: {hex0x(payload.approval_signature)}")
            print(f"Value: {hex0x(payload.value)}")
        except CCIPWriteError as e:
            print(f"Error decoding payload: {e}")

    def do_namehash(self, arg):
        """Show the ENS namehash of a name: namehash <name>"""
        print(hex0x(namehash(arg.strip())))

    def do_status(self, arg):
        """Show session status"""
        if self.session is None or self.session.closed:
            print("Session: CLOSED")
        else:
            print("Session: OPEN")
            print(f"Signer: {self.session.address}")
        print(f"Approval: {'PRESENT' if self.approval else 'NONE'}")
        destination = default_destination()
        print(f"Gateway: {destination.gateway_url if destination else 'NOT CONFIGURED'}")

    def do_close(self, arg):
        """Close the signing session and wipe its key"""
        if self.session is not None:
            self.session.close()
        self.approval = None
        print("Session closed")

    def do_exit(self, arg):
        """Exit the signer CLI"""
        self.do_close(arg)
        print("Goodbye!")
        return True

    def do_quit(self, arg):
        """Exit the signer CLI"""
        return self.do_exit(arg)


def main():
    """Main entry point"""
    setup_logging()
    cli = SignerCLI()
    try:
        cli.cmdloop()
    except KeyboardInterrupt:
        cli.do_close("")
        print("\nGoodbye!")
        sys.exit(0)
    except Exception as e:
        cli.do_close("")
        logger.error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
