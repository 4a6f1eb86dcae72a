#!/usr/bin/env python3
"""
Example of resolving protocol numbers from flow records and overriding the
bundled dataset with a local one.
"""

import io

import ip_protocol_registry as ipproto
from ip_protocol_registry.logging_utils import setup_logger


def main():
    setup_logger(level="INFO")

    # Protocol numbers as they appear in flow logs
    sample_flows = [
        {"srcaddr": "10.0.1.100", "dstaddr": "8.8.8.8", "protocol": "17"},
        {"srcaddr": "10.0.1.100", "dstaddr": "203.0.113.12", "protocol": "6"},
        {"srcaddr": "192.168.1.1", "dstaddr": "10.0.1.100", "protocol": "50"},
        {"srcaddr": "10.0.1.100", "dstaddr": "198.51.100.7", "protocol": "200"},
    ]

    print("Flow protocols:")
    for flow in sample_flows:
        label = ipproto.format_protocol(flow["protocol"])
        print(f"  {flow['srcaddr']} -> {flow['dstaddr']}: {label}")

    print("\nName lookups:")
    for name in ["tcp", "Internet Control Message", "encap  security payload"]:
        print(f"  {name!r} -> {ipproto.lookup_decimal(name)}")

    # Replace the bundled data with a site-local registry
    local_csv = io.BytesIO(
        b"Decimal,Keyword,Protocol,IPv6 Extension Header,Reference\n"
        b"6,TCP,Transmission Control,,[RFC9293]\n"
        b"253,LAB-TUNNEL,Lab tunnel encapsulation,,[local]\n"
    )
    ipproto.load_from_reader(local_csv)

    print("\nAfter override:")
    print(f"  253 -> {ipproto.lookup_keyword(253)}")
    print(f"  17 -> {ipproto.lookup_keyword(17)}")


if __name__ == "__main__":
    main()
