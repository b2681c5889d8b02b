#!/usr/bin/env python3
"""
TGS Request Building Example

Demonstrates how to use TGSBuilder to turn a TGT and its session key
into KRB_TGS_REQ messages ready to send to a KDC.

Features:
1. Plain service ticket request
2. Authorization data encrypted under the request subkey
3. S4U2Self (PA-FOR-USER) and S4U2Proxy (additional tickets, PA-PAC-OPTIONS)
4. Errors as values with try_build_tgs_request
5. Reproducible requests for test vectors

The TGT below is a placeholder. In practice it comes from an AS exchange
(or a ccache) together with its session key.
"""

from datetime import datetime, timezone

from returns.result import Failure, Success

from tgsbuilder.core.sources import FixedClock
from tgsbuilder.core.types import EncryptionType, KDCOptions, NameType
from tgsbuilder.kerberos import (
    AuthorizationData,
    AuthorizationDataEntry,
    EncryptedData,
    EncryptionKey,
    PrincipalName,
    Ticket,
    TGSRequestOptions,
    build_pa_for_user,
    build_pa_pac_options,
    build_pa_pac_request,
    create_tgs_builder,
    encode,
)


def main():
    """Demonstrate TGS-REQ construction."""

    print("=" * 70)
    print("TGSBuilder - Building TGS Requests")
    print("=" * 70)
    print()

    REALM = "EXAMPLE.COM"

    tgt = Ticket(
        realm=REALM,
        sname=PrincipalName(name_type=NameType.NT_SRV_INST, components=("krbtgt", REALM)),
        enc_part=EncryptedData(etype=18, kvno=2, cipher=b"\x00" * 64),
    )
    session_key = EncryptionKey(
        keytype=EncryptionType.AES256_CTS_HMAC_SHA1_96, keyvalue=b"\x01" * 32
    )

    # ==========================================================================
    # EXAMPLE 1: Service ticket request
    # ==========================================================================
    print("1. Service Ticket Request")
    print("-" * 40)

    builder = create_tgs_builder(
        default_etype=EncryptionType.AES256_CTS_HMAC_SHA1_96,
        etypes=(EncryptionType.AES256_CTS_HMAC_SHA1_96, EncryptionType.RC4_HMAC),
    )
    request = builder.build_tgs_request(
        TGSRequestOptions(
            ticket=tgt,
            session_key=session_key,
            cname="alice",
            realm=REALM,
            sname="cifs/fs.example.com",
        )
    )
    wire = encode(request)

    print(f"   Service: {request.req_body.sname}")
    print(f"   Nonce: {request.req_body.nonce}")
    print(f"   KDC options: {request.req_body.kdc_options:#010x}")
    print(f"   PA-DATA types: {[pa.padata_type for pa in request.padata]}")
    print(f"   Encoded: {len(wire)} bytes, starts {wire[:4].hex()}")
    print()

    # ==========================================================================
    # EXAMPLE 2: Authorization data
    # ==========================================================================
    print("2. Authorization Data")
    print("-" * 40)

    restrictions = AuthorizationData(
        entries=(AuthorizationDataEntry(ad_type=141, ad_data=b"\x00" * 8),)
    ).if_relevant()
    request = builder.build_tgs_request(
        TGSRequestOptions(
            ticket=tgt,
            session_key=session_key,
            cname="alice",
            realm=REALM,
            sname="http/web.example.com",
            auth_data=restrictions,
        )
    )
    enc = request.req_body.enc_authorization_data
    print(f"   enc-authorization-data etype: {enc.etype}")
    print(f"   Ciphertext: {len(enc.cipher)} bytes (under the subkey, usage 5)")
    print()

    # ==========================================================================
    # EXAMPLE 3: S4U2Self then S4U2Proxy
    # ==========================================================================
    print("3. S4U2Self / S4U2Proxy")
    print("-" * 40)

    s4u_self = builder.build_tgs_request(
        TGSRequestOptions(
            ticket=tgt,
            session_key=session_key,
            cname="websvc",
            realm=REALM,
            sname="websvc",
            kdc_options=KDCOptions(forwardable=True, renewable=True, canonicalize=True),
            pa_data=(
                build_pa_for_user("administrator", REALM, session_key),
                build_pa_pac_request(True),
            ),
        )
    )
    print(f"   S4U2Self PA-DATA: {[pa.padata_type for pa in s4u_self.padata]}")

    # The ticket returned by S4U2Self becomes the evidence ticket
    evidence = Ticket(
        realm=REALM,
        sname=PrincipalName.from_string("websvc"),
        enc_part=EncryptedData(etype=18, cipher=b"\x00" * 64),
    )
    s4u_proxy = builder.build_tgs_request(
        TGSRequestOptions(
            ticket=tgt,
            session_key=session_key,
            cname="websvc",
            realm=REALM,
            sname="cifs/fs.example.com",
            kdc_options=KDCOptions(forwardable=True, cname_in_addl_tkt=True, canonicalize=True),
            additional_tickets=(evidence,),
            pa_data=(build_pa_pac_options(),),
        )
    )
    print(f"   S4U2Proxy PA-DATA: {[pa.padata_type for pa in s4u_proxy.padata]}")
    print(f"   Additional tickets: {len(s4u_proxy.req_body.additional_tickets)}")
    print()

    # ==========================================================================
    # EXAMPLE 4: Errors as values
    # ==========================================================================
    print("4. Result API")
    print("-" * 40)

    result = builder.try_build_tgs_request(TGSRequestOptions(cname="alice", realm=REALM))
    if isinstance(result, Success):
        print("   Unexpected success")
    elif isinstance(result, Failure):
        print(f"   Failure: {result.failure()}")
    print()

    # ==========================================================================
    # EXAMPLE 5: Reproducible requests
    # ==========================================================================
    print("5. Deterministic Mode")
    print("-" * 40)

    clock = FixedClock(datetime(2024, 1, 1, tzinfo=timezone.utc))
    options = TGSRequestOptions(
        ticket=tgt, session_key=session_key, cname="alice", realm=REALM, sname="krbtgt/" + REALM
    )
    first = encode(create_tgs_builder(deterministic=True, seed=1234, clock=clock).build_tgs_request(options))
    second = encode(create_tgs_builder(deterministic=True, seed=1234, clock=clock).build_tgs_request(options))
    print(f"   Identical output: {first == second}")
    print()

    print("=" * 70)
    print("Examples completed successfully!")
    print("=" * 70)


if __name__ == "__main__":
    main()
