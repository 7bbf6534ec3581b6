"""
Training Module with Rich Terminal UI

This module loads a corpus, splits it into training and test sentences,
trains the bidirectional model and reports perplexity on both subsets
using the Rich library.
"""

from typing import Optional, List, Dict, Tuple
from rich.console import Console
from rich.progress import (
    Progress, SpinnerColumn, TextColumn, BarColumn,
    TaskProgressColumn, TimeElapsedColumn
)
from rich.panel import Panel
from rich.table import Table
from rich import box

from .interpolation import BidirectionalBigramModel, InterpolationWeights
from .smoothing import parse_smoothing
from .corpus import (
    load_brown_corpus, load_pos_tagged_files, split_corpus, word_count
)


console = Console()


def create_stats_table(stats: Dict) -> Table:
    """Create a Rich table displaying training statistics."""
    table = Table(box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="green")
    table.add_column("Value", style="yellow", justify="right")

    for key, value in stats.items():
        display_key = key.replace('_', ' ').title()

        if isinstance(value, float):
            display_value = f"{value:,.4f}"
        elif isinstance(value, int):
            display_value = f"{value:,}"
        elif isinstance(value, list):
            display_value = f"{len(value)} items"
        else:
            display_value = str(value)

        table.add_row(display_key, display_value)

    return table


def load_corpus(paths: Optional[List[str]] = None,
                categories: Optional[List[str]] = None,
                use_brown: bool = False) -> Tuple[List[List[str]], Dict]:
    """Load sentences from POS-tagged files, or the Brown corpus."""
    if use_brown:
        return load_brown_corpus(categories=categories)
    if not paths:
        raise ValueError("No input files given")
    return load_pos_tagged_files(paths)


def evaluate_model_cli(model: BidirectionalBigramModel,
                       sentences: List[List[str]],
                       label: str = "test") -> Optional[float]:
    """
    Report word perplexity on sentences.

    Returns None, without scoring, when there are no tokens to score.
    """
    if word_count(sentences) == 0:
        console.print(f"[yellow]![/yellow] No {label} tokens, skipping perplexity")
        return None

    return model.corpus_perplexity(sentences)


def train_model_cli(
    paths: Optional[List[str]] = None,
    test_fraction: float = 0.1,
    weights: Optional[InterpolationWeights] = None,
    smoothing: str = "unigram_interpolation",
    min_count: int = 1,
    unk_first_occurrence: bool = True,
    use_brown: bool = False,
    categories: Optional[List[str]] = None,
    save_path: Optional[str] = None
) -> Tuple[BidirectionalBigramModel, Dict]:
    """
    Train a bidirectional model and evaluate it on training and test data.

    Uses the last ``test_fraction`` of the sentences for testing and the
    rest for training.

    Returns:
        Tuple of (trained model, dict with train and test perplexity)
    """
    smoothing_method = parse_smoothing(smoothing)
    weights = weights or InterpolationWeights()

    console.print()
    console.print(Panel.fit(
        "[bold blue]Bidirectional Bigram Model Training[/bold blue]",
        border_style="blue"
    ))
    console.print()

    config_table = Table(box=box.SIMPLE, show_header=False)
    config_table.add_column("Setting", style="cyan")
    config_table.add_column("Value", style="white")
    config_table.add_row("Corpus", "Brown" if use_brown else ", ".join(paths or []))
    config_table.add_row("Test Fraction", str(test_fraction))
    config_table.add_row("Forward Weight", str(weights.forward))
    config_table.add_row("Backward Weight", str(weights.backward))
    config_table.add_row("Smoothing Method", smoothing_method.value)
    config_table.add_row("Min Word Count", str(min_count))
    config_table.add_row("First Occurrence As <UNK>", str(unk_first_occurrence))

    console.print(Panel(config_table, title="[bold]Configuration[/bold]", border_style="green"))
    console.print()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console
    ) as progress:
        task = progress.add_task("[cyan]Loading corpus...", total=None)
        sentences, corpus_stats = load_corpus(paths, categories, use_brown)
        progress.update(task, completed=100, total=100)
        progress.remove_task(task)

    console.print(f"[green]✓[/green] Loaded {corpus_stats['num_sentences']:,} sentences "
                  f"({corpus_stats['total_tokens']:,} tokens)")

    train_sentences, test_sentences = split_corpus(sentences, test_fraction)
    console.print(f"# Train Sentences = {len(train_sentences)} "
                  f"(# words = {word_count(train_sentences)})", highlight=False)
    console.print(f"# Test Sentences = {len(test_sentences)} "
                  f"(# words = {word_count(test_sentences)})", highlight=False)
    console.print()

    model = BidirectionalBigramModel(
        weights=weights,
        smoothing=smoothing_method,
        min_count=min_count,
        unk_first_occurrence=unk_first_occurrence
    )

    console.print("Training...")
    stats = model.train(train_sentences)

    console.print(Panel(
        create_stats_table(stats),
        title="[bold]Training Statistics[/bold]",
        border_style="yellow"
    ))

    results = {'train_perplexity': evaluate_model_cli(model, train_sentences, "training")}

    console.print("Testing...")
    results['test_perplexity'] = evaluate_model_cli(model, test_sentences, "test")

    if save_path:
        console.print()
        with console.status("[cyan]Saving model..."):
            model.save(save_path)
        console.print(f"[green]✓[/green] Model saved to: [bold]{save_path}[/bold]")

    console.print()

    return model, results
