# Performance Chart - Chart Generator
"""
Generate normalized performance charts using matplotlib.

Every enabled ticker is drawn as one line on a shared base-100 axis.
Months where a ticker has no data are left as gaps.
"""

import os
import io
import base64
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
import numpy as np

from ..models import AlignedRow, TickerConfig


def to_chart_records(rows: Sequence[AlignedRow],
                     enabled: Optional[Mapping[str, bool]] = None) -> List[Dict[str, Any]]:
    """Flatten aligned rows into {"date": label, SYMBOL: value} records.

    Args:
        rows: Aligned rows in date order
        enabled: Visibility per ticker; tickers mapped to False are dropped

    Returns:
        One dict per row, holding only visible tickers that have data
    """
    records = []
    for row in rows:
        record: Dict[str, Any] = {"date": row.date_label}
        for symbol, value in row.values.items():
            if enabled is None or enabled.get(symbol, False):
                record[symbol] = value
        records.append(record)
    return records


class PerformanceChartGenerator:
    """Generate normalized performance charts."""

    def __init__(self, charts_dir: str = "charts"):
        """Initialize chart generator.

        Args:
            charts_dir: Directory to save chart images
        """
        self.charts_dir = charts_dir

        # Style settings
        plt.style.use('seaborn-v0_8-whitegrid')
        self.palette = [
            '#3B82F6',  # Blue
            '#F59E0B',  # Yellow
            '#10B981',  # Green
            '#EF4444',  # Red
            '#8B5CF6',  # Purple
        ]
        self.baseline_color = '#9CA3AF'

    def _save_or_encode(self, fig: plt.Figure, chart_name: str,
                        save_to_file: bool = False) -> str:
        """Save chart to file or return base64 encoded image."""
        if save_to_file:
            os.makedirs(self.charts_dir, exist_ok=True)
            date_str = datetime.now().strftime("%Y-%m-%d")
            filepath = os.path.join(self.charts_dir, f"{date_str}_{chart_name}.png")
            fig.savefig(filepath, dpi=150, bbox_inches='tight',
                       facecolor='white', edgecolor='none')
            plt.close(fig)
            return filepath

        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=150, bbox_inches='tight',
                   facecolor='white', edgecolor='none')
        buf.seek(0)
        img_base64 = base64.b64encode(buf.read()).decode('utf-8')
        plt.close(fig)
        return f"data:image/png;base64,{img_base64}"

    def generate_performance_chart(self, rows: Sequence[AlignedRow],
                                   tickers: Sequence[TickerConfig],
                                   enabled: Optional[Mapping[str, bool]] = None,
                                   range: str = "5y",
                                   save_to_file: bool = False) -> str:
        """Generate the normalized performance line chart.

        Args:
            rows: Aligned rows in date order
            tickers: Configured tickers, in legend order
            enabled: Visibility per ticker (all visible when None)
            range: Range label used in the title
            save_to_file: Whether to save to file

        Returns:
            File path or base64 encoded image
        """
        fig, ax = plt.subplots(figsize=(12, 6))
        title = f'{range.upper()} Performance (base = 100)'
        chart_name = f'performance_{range}'

        visible = [
            t for t in tickers
            if (enabled is None or enabled.get(t.symbol, False))
            and any(t.symbol in row.values for row in rows)
        ]

        if not rows or not visible:
            ax.text(0.5, 0.5, 'No performance data available',
                   ha='center', va='center', fontsize=14)
            ax.set_title(title)
            return self._save_or_encode(fig, chart_name, save_to_file)

        labels = [row.date_label for row in rows]
        x_data = np.arange(len(labels))

        for idx, ticker in enumerate(visible):
            # NaN breaks the line where the ticker has no data
            values = np.array([row.values.get(ticker.symbol, np.nan) for row in rows],
                              dtype=float)
            ax.plot(x_data, values, color=self.palette[idx % len(self.palette)],
                   linewidth=2, label=f'{ticker.symbol} - {ticker.display_name}')

        ax.axhline(y=100, color=self.baseline_color, linestyle='--', alpha=0.6)

        # Formatting
        ax.set_title(title, fontsize=14, fontweight='bold')
        ax.set_xlabel('Month', fontsize=10)
        ax.set_ylabel('Normalized Value', fontsize=10)
        ax.yaxis.set_major_formatter(plt.FuncFormatter(lambda v, p: f'{v:.0f}'))

        step = max(1, len(labels) // 12)
        ax.set_xticks(x_data[::step])
        ax.set_xticklabels(labels[::step], rotation=45, fontsize=9)

        ax.legend(loc='upper left', framealpha=0.9, fontsize=9)
        ax.grid(True, alpha=0.3)
        plt.tight_layout()

        return self._save_or_encode(fig, chart_name, save_to_file)


# Global instance
chart_generator = PerformanceChartGenerator()
