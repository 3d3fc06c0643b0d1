# 訓練履歴（エポックごとの損失・正解率）を描画するモジュール
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from attrition.model.models import TrainingHistory


def plot_training_history(history: TrainingHistory) -> Figure:
    epochs = range(1, history.epochs + 1)
    fig, (ax_loss, ax_acc) = plt.subplots(1, 2, figsize=(12, 5))
    ax_loss.plot(epochs, history.loss, "o-")
    ax_loss.set_xlabel("Epoch")
    ax_loss.set_ylabel("Loss")
    ax_loss.set_title("Training Loss")
    ax_acc.plot(epochs, history.accuracy, "o-")
    ax_acc.set_xlabel("Epoch")
    ax_acc.set_ylabel("Accuracy")
    ax_acc.set_ylim(0, 1)
    ax_acc.set_title("Training Accuracy")
    fig.tight_layout()

    return fig
