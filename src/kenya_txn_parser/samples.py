"""
Example messages for every supported format.

Used by the CLI ``samples`` command to load an example and by the test
suite as its seed corpus.
"""

NCBA_DEBIT_NOTIFICATION = (
    "Your account 992****013 has been debited with KES 8,247.00 on 16/11/25 "
    "at 02:34 PM. Ref: FTX25320XAREM"
)

NCBA_TILL_TRANSFER = (
    "Dear Customer, your Mpesa Till transfer of KES 8,247.00 to 65575 Naivas Kitengela "
    "was successful. BANK REF. FTX25320XAREM MPESA REF. TKGSG4268Q. NCBA, Go for it!"
)

SAMPLE_MESSAGES: dict[str, str] = {
    "mpesa_till": (
        "SHK1ABC123 Confirmed. Ksh500.00 paid to JAVA HOUSE - SARIT CENTRE. on 23/12/24 "
        "at 2:15 PM. Transaction cost, Ksh0.00. New M-PESA balance is Ksh15,234.50."
    ),
    "mpesa_paybill": (
        "SKL2XYZ456 Confirmed. Ksh2,500.00 paid to KPLC PREPAID. Account Number 123456789 "
        "on 23/12/24 at 10:30 AM. Transaction cost, Ksh0.00. New M-PESA balance is "
        "Ksh12,734.50."
    ),
    "mpesa_send": (
        "SLM3DEF789 Confirmed. Ksh1,000.00 sent to JOHN DOE 254712345678 on 23/12/24 "
        "at 3:45 PM. Transaction cost, Ksh7.00. New M-PESA balance is Ksh14,227.50."
    ),
    "mpesa_withdraw": (
        "SMN4GHI012 Confirmed. Ksh5,000.00 withdrawn from MAMA NJERI - WESTLANDS on "
        "23/12/24 at 4:20 PM. Transaction cost, Ksh33.00. New M-PESA balance is "
        "Ksh9,194.50."
    ),
    "mpesa_received": (
        "SRP5JKL345 Confirmed. You have received Ksh3,000.00 from JANE WANJIKU "
        "254722334455 on 23/12/24 at 11:00 AM. New M-PESA balance is Ksh18,194.50."
    ),
    "airtel_money_send": (
        "CK23A4B5C6 Confirmed. You have sent Ksh 800.00 to MARY AKINYI 254733123456 "
        "on 23/12/24 at 5:30 PM. Transaction fee Ksh 10.00. Your Airtel Money balance "
        "is Ksh 2,190.00."
    ),
    "kcb": (
        "KCB: Acc XXX123 debited with Ksh3,500.00 on 23/12/24. Paid to CARREFOUR "
        "SUPERMARKET. Txn Ref: FTB8765432. Avail. Bal Ksh45,678.90."
    ),
    "equity": (
        "Equity Bank: Your account 0123456789 has been credited with KES 25,000.00 from "
        "EMPLOYER NAME on 23Dec24. Ref: SAL123456. Balance: KES 67,890.00"
    ),
    "coop": (
        "Co-op Bank: KES 1,200.00 withdrawn from A/C ****5678 via ATM on 23/12/24. "
        "Transaction charges KES 35.00. Available Balance KES 23,456.00. Ref: ATM9876543"
    ),
    "ncba_debit_notification": NCBA_DEBIT_NOTIFICATION,
    "ncba_till_transfer": NCBA_TILL_TRANSFER,
    "ncba_till_combined": f"{NCBA_DEBIT_NOTIFICATION}\n\n{NCBA_TILL_TRANSFER}",
    "ncba_mpesa_transfer": (
        "Dear Customer, your MPESA transfer of KES. 1,500.00 to JOHN DOE (254712345678) "
        "has been processed successfully. MPESA ref number TKH7AB12CD. NCBA, Go for it!"
    ),
    "ncba_paybill_transfer": (
        "Your Mpesa Paybill payment of KES 2,350.00 to 888880 Account 54213678901 was "
        "successful. BANK REF. FTX25321PBLQ MPESA REF. TKH2PB7781. NCBA, Go for it!"
    ),
}


def get_sample(name: str) -> str:
    """
    Return a sample message by name.

    Raises:
        KeyError: If no sample has that name
    """
    try:
        return SAMPLE_MESSAGES[name]
    except KeyError:
        available = ", ".join(sorted(SAMPLE_MESSAGES))
        raise KeyError(f"Unknown sample {name!r}; available: {available}") from None
