from qios.schemas.analytics import BusinessData
from qios.services.analytics.parsers import tags_for

LOW_STOCK_THRESHOLD = 10
HIGH_VALUE_PRICE = 100000

_PERSONA = "Kamu adalah AI business analyst expert untuk UMKM/SMB di Indonesia."
_CLOSING = (
    "PENTING: Gunakan bahasa yang profesional namun mudah dipahami. "
    "Hindari paragraf yang terlalu panjang."
)


def rupiah(value: float) -> str:
    return "Rp " + f"{value:,.0f}".replace(",", ".")


def total_sales(data: BusinessData) -> float:
    return sum(s.amount for s in data.sales)


def total_expenses(data: BusinessData) -> float:
    return sum(e.amount for e in data.expenses)


def low_stock_items(data: BusinessData):
    return [i for i in data.inventory if i.stock < LOW_STOCK_THRESHOLD]


def _format_block(kind: str, first_hint: str, second_hint: str) -> str:
    tags = tags_for(kind)
    lines = [
        "Berikan 5-6 insights dalam format:",
        "",
        f"1. [{tags[0]}] Judul",
        first_hint,
        "",
        f"2. [{tags[1]}] Judul",
        second_hint,
        "",
        "Tag yang boleh dipakai: " + ", ".join(f"[{t}]" for t in tags),
    ]
    return "\n".join(lines)


def insights_prompt(data: BusinessData) -> str:
    sales = total_sales(data)
    expenses = total_expenses(data)
    avg_order = sales / len(data.sales) if data.sales else 0
    categories = ", ".join(sorted({e.category for e in data.expenses if e.category}))
    high_value_customers = [c for c in data.customers if c.total_spent > avg_order * 5]

    return f"""{_PERSONA}

Analisis data bisnis berikut:

SALES DATA:
- Total Sales: {rupiah(sales)}
- Number of Transactions: {len(data.sales)}
- Average Order Value: {rupiah(avg_order)}
- Total Customers: {len(data.customers)}

INVENTORY DATA:
- Total Products: {len(data.inventory)}
- Low Stock Items: {len(low_stock_items(data))}
- High Value Items: {len([i for i in data.inventory if i.price > HIGH_VALUE_PRICE])}

EXPENSE DATA:
- Total Expenses: {rupiah(expenses)}
- Expense Categories: {categories}

CUSTOMER DATA:
- High Value Customers: {len(high_value_customers)}

Berikan insights bernomor (1., 2., ...) tentang:
1. Tren penjualan dan peluang
2. Optimasi inventori
3. Pola perilaku pelanggan
4. Manajemen biaya
5. Rekomendasi pertumbuhan

Tandai kata "tren", "peringatan" atau "anomali" bila relevan.
{_CLOSING}"""


def inventory_prompt(data: BusinessData) -> str:
    low = low_stock_items(data)
    listing = "\n".join(f"{i.name}: {i.stock:g} units" for i in low) or "-"

    return f"""Kamu adalah ahli manajemen inventori untuk bisnis retail.

Analisis data inventori berikut:

Total Products: {len(data.inventory)}
Low Stock Items: {len(low)}
High Value Items: {len([i for i in data.inventory if i.price > HIGH_VALUE_PRICE])}

Produk dengan stok rendah:
{listing}

Berikan saran (recommend) manajemen stok yang praktis, satu per baris."""


def growth_prompt(data: BusinessData) -> str:
    ordered = sorted(data.sales, key=lambda s: s.date)
    first_total = sum(s.amount for s in ordered[:30])
    last_total = sum(s.amount for s in ordered[-30:])
    rate = (last_total - first_total) / first_total * 100 if first_total else 0.0
    block = _format_block(
        "growth",
        "Penjelasan detail tentang tren pertumbuhan. Gunakan bullet points (-) bila perlu.",
        "Identifikasi peluang untuk akselerasi dalam 2-3 kalimat.",
    )

    return f"""{_PERSONA}

Analisis PERTUMBUHAN BISNIS berdasarkan data berikut:

DATA PERTUMBUHAN:
- Penjualan Bulan Pertama: {rupiah(first_total)}
- Penjualan Bulan Terakhir: {rupiah(last_total)}
- Growth Rate: {rate:.2f}%
- Total Transaksi: {len(data.sales)}
- Jumlah Pelanggan: {len(data.customers)}

{block}

Fokus pada growth rate, faktor pendorong, peluang ekspansi dan proyeksi 3-6 bulan.
{_CLOSING}"""


def monthly_prompt(data: BusinessData) -> str:
    sales = total_sales(data)
    expenses = total_expenses(data)
    net = sales - expenses
    margin = net / sales * 100 if sales else 0.0
    active = len([c for c in data.customers if c.frequency > 5])
    block = _format_block(
        "monthly",
        "Pencapaian bulan ini. Gunakan bullet points (-) untuk rincian.",
        "Hal yang perlu diperbaiki bulan depan dalam 2-3 kalimat.",
    )

    return f"""{_PERSONA}

Berikan EVALUASI BULANAN berdasarkan data berikut:

PERFORMA BULAN INI:
- Total Penjualan: {rupiah(sales)}
- Total Pengeluaran: {rupiah(expenses)}
- Net Profit: {rupiah(net)}
- Profit Margin: {margin:.2f}%
- Jumlah Transaksi: {len(data.sales)}
- Jumlah Pelanggan Aktif: {active}

{block}

Fokus pada pencapaian target, efisiensi pengeluaran, produk best-seller vs slow-moving dan retensi pelanggan.
{_CLOSING}"""


def risks_prompt(data: BusinessData) -> str:
    top_frequency = data.customers[0].frequency if data.customers else 0
    block = _format_block(
        "risks",
        "Penjelasan detail tentang risiko yang terdeteksi.",
        "Langkah konkret untuk meminimalkan risiko dalam 2-3 kalimat.",
    )

    return f"""Kamu adalah AI risk management expert untuk UMKM/SMB di Indonesia.

Identifikasi RISIKO BISNIS dan strategi MITIGASI berdasarkan data berikut:

DATA BISNIS:
- Total Penjualan: {rupiah(total_sales(data))}
- Total Pengeluaran: {rupiah(total_expenses(data))}
- Produk Stok Rendah: {len(low_stock_items(data))} produk
- Jumlah Pelanggan: {len(data.customers)}
- Dependency pada Top Customer: {top_frequency} transaksi

{block}

Fokus pada risiko stok, arus kas, kehilangan pelanggan, operasional dan kompetisi.
{_CLOSING}"""


def trends_prompt(data: BusinessData) -> str:
    sales = total_sales(data)
    avg_daily = sales / len(data.sales) if data.sales else 0
    block = _format_block(
        "trends",
        "Prediksi penjualan 1-3 bulan ke depan. Gunakan bullet points (-) untuk rincian.",
        "Pola musiman yang perlu diantisipasi dalam 2-3 kalimat.",
    )

    return f"""{_PERSONA}

Berikan PREDIKSI TREN berdasarkan data historis berikut:

DATA HISTORIS:
- Total Penjualan: {rupiah(sales)}
- Rata-rata Harian: {rupiah(avg_daily)}
- Periode Data: {len(data.sales)} hari
- Jumlah Produk: {len(data.inventory)}
- Jumlah Pelanggan: {len(data.customers)}

{block}

Fokus pada prediksi 30 hari, preferensi produk, pola musiman dan persiapan stok.
{_CLOSING}"""


def cashflow_prompt(data: BusinessData, sales_trend: str, expense_trend: str) -> str:
    sales = total_sales(data)
    expenses = total_expenses(data)

    return f"""Kamu adalah penasihat keuangan untuk manajemen arus kas UMKM.

Total Sales: {rupiah(sales)}
Total Expenses: {rupiah(expenses)}
Net Cashflow: {rupiah(sales - expenses)}

Sales Trend: {sales_trend}
Expense Trend: {expense_trend}

Berikan rekomendasi (recommend) optimasi arus kas dan identifikasi risiko (risk), satu per baris."""

